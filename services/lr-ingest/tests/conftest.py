"""Pytest fixtures for the Lightroom client tests."""

from __future__ import annotations

import json
import re
from typing import Any, Callable, List, Tuple, Union

import httpx
import pytest

from lr_ingest.client import LightroomClient
from lr_ingest.config import Settings, get_settings

API_KEY = "test-api-key"
HEX_ID = "[0-9a-f]{32}"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def guarded(document: Any) -> httpx.Response:
    """A 200 response carrying ``document`` behind the while(1){} guard."""
    return httpx.Response(200, text="while (1) {}\n" + json.dumps(document))


class FakeLightroom:
    """Routes requests by method and path regex, recording every request seen."""

    def __init__(self) -> None:
        self.routes: List[Tuple[str, re.Pattern, Responder]] = []
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, response: Responder) -> None:
        self.routes.append((method, re.compile(path), response))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, pattern, response in self.routes:
            if request.method == method and pattern.fullmatch(request.url.path):
                return response(request) if callable(response) else response
        return httpx.Response(404)

    def sent(self, method: str, path: str) -> List[httpx.Request]:
        pattern = re.compile(path)
        return [r for r in self.requests if r.method == method and pattern.fullmatch(r.url.path)]


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key=API_KEY, endpoint="https://lr.test", _env_file=None)


@pytest.fixture
def fake() -> FakeLightroom:
    return FakeLightroom()


@pytest.fixture
def lr(settings: Settings, fake: FakeLightroom) -> LightroomClient:
    return LightroomClient(settings, transport=httpx.MockTransport(fake))


@pytest.fixture
def clean_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
