"""Lightroom ingestion client - create revisions, upload masters, attach to projects."""

__version__ = "0.1.0"

from .client import LightroomClient
from .config import Settings, get_settings
from .errors import (
    DuplicateContentError,
    EmptyResultError,
    InvalidPayloadError,
    LightroomError,
    MalformedResponseError,
    MissingTokenError,
    TransportError,
)
from .http import LrHttp, content_range, parse_guarded_json, strip_guard
from .ids import create_uuid

__all__ = [
    "__version__",
    # Client
    "LightroomClient",
    "LrHttp",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "DuplicateContentError",
    "EmptyResultError",
    "InvalidPayloadError",
    "LightroomError",
    "MalformedResponseError",
    "MissingTokenError",
    "TransportError",
    # Helpers
    "content_range",
    "create_uuid",
    "parse_guarded_json",
    "strip_guard",
]
