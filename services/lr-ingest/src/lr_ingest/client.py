"""Lightroom catalog client: project lookup, image ingestion and album attachment."""

from __future__ import annotations

import hashlib
from typing import Any, Dict, List, Optional

import httpx

from .config import Settings, get_settings
from .errors import (
    DuplicateContentError,
    EmptyResultError,
    InvalidPayloadError,
    MissingTokenError,
    TransportError,
)
from .http import LrHttp, content_range
from .ids import create_uuid
from .logging import get_logger
from .models import AlbumAssets, ProjectAlbum, RevisionContent, is_service_project

logger = get_logger(__name__)

MASTER_CONTENT_TYPE = "application/octet-stream"
DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024
HEALTH_UP = "Lightroom Services are up"
HEALTH_DOWN = "Lightroom Services are down"


def _require_token(token: Optional[str], operation: str) -> str:
    if not token:
        raise MissingTokenError(operation)
    return token


def _wrap(operation: str, exc: TransportError) -> TransportError:
    """Prefix a transport failure with the operation, keeping the reason when there is no status."""

    if exc.status_code is None:
        return TransportError(f"{operation}: {exc.message}")
    return TransportError(operation, exc.status_code)


def _revision_url(catalog_id: str, asset_id: str, revision_id: str) -> str:
    return f"/v2/catalogs/{catalog_id}/assets/{asset_id}/revisions/{revision_id}"


class LightroomClient:
    """Async client for the Lightroom catalog services.

    Operations run their requests strictly one after another. Multi-step
    workflows never undo an earlier step when a later one fails, so a failed
    upload may leave a revision without a master, and a failed attachment may
    leave an asset outside of any album.

    Usage::

        async with LightroomClient() as lr:
            catalog = await lr.get_catalog(token)
            asset_id = await lr.upload_image(token, account_id, catalog["id"], "a.jpg", data)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http: Optional[LrHttp] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._http = http or LrHttp(self._settings, transport=transport)

    async def __aenter__(self) -> "LightroomClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def service_id(self) -> str:
        return self._settings.api_key

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    async def get_health(self) -> str:
        """Probe the services; reports a status string instead of raising."""

        try:
            await self._http.request("GET", "/v2/health")
        except TransportError as exc:
            logger.warning("lightroom health check failed", error=str(exc))
            return HEALTH_DOWN
        return HEALTH_UP

    async def _get_json(self, token: Optional[str], relative_url: str, operation: str) -> Any:
        token = _require_token(token, operation)
        try:
            return await self._http.get_json(token, relative_url)
        except TransportError as exc:
            logger.warning(operation, status=exc.status_code)
            raise _wrap(operation, exc) from exc

    async def get_account(self, token: Optional[str]) -> Dict[str, Any]:
        return await self._get_json(token, "/v2/accounts/me", "get account failed")

    async def get_catalog(self, token: Optional[str]) -> Dict[str, Any]:
        return await self._get_json(token, "/v2/catalogs/mine", "get catalog failed")

    async def get_projects(self, token: Optional[str], catalog_id: str) -> Dict[str, Any]:
        """Return the catalog's project albums published by this integration.

        The response document is returned as received, with ``resources``
        narrowed to the albums whose ``publishInfo.serviceId`` is our API key.
        """

        projects = await self._get_json(
            token,
            f"/v2/catalogs/{catalog_id}/albums?subtype=project",
            "get projects failed",
        )
        projects = projects or {}
        projects["resources"] = [
            resource
            for resource in projects.get("resources", [])
            if is_service_project(resource, self.service_id)
        ]
        return projects

    async def get_first_album_asset(
        self, token: Optional[str], catalog_id: str, album_id: str
    ) -> Optional[Dict[str, Any]]:
        """Return the first asset of an album, or ``None`` if it is empty."""

        assets = await self._get_json(
            token,
            f"/v2/catalogs/{catalog_id}/albums/{album_id}/assets?limit=1",
            "get album assets failed",
        )
        resources: List[Dict[str, Any]] = (assets or {}).get("resources", [])
        return resources[0] if resources else None

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    async def create_project(self, token: Optional[str], catalog_id: str) -> str:
        token = _require_token(token, "create project failed")
        album_id = create_uuid()
        content = ProjectAlbum.new(album_id, self.service_id).to_json()
        try:
            await self._http.put_json(token, f"/v2/catalogs/{catalog_id}/albums/{album_id}", content)
        except TransportError as exc:
            logger.warning("create project failed", status=exc.status_code)
            raise _wrap("create project failed", exc) from exc
        logger.info("created project", catalog_id=catalog_id, album_id=album_id)
        return f"created project with id {album_id}"

    async def upload_image(
        self,
        token: Optional[str],
        imported_by: str,
        catalog_id: str,
        file_name: str,
        data: bytes,
    ) -> str:
        """Create a new asset revision and upload ``data`` as its master.

        Returns the new asset id.

        Raises:
            DuplicateContentError: The same bytes were already ingested.
            TransportError: Revision creation or master upload failed.
            InvalidPayloadError: ``data`` is empty.
        """

        token = _require_token(token, "upload image failed")
        if not data:
            raise InvalidPayloadError("upload image failed: empty master")

        asset_id = create_uuid()
        revision_id = create_uuid()
        revision_url = _revision_url(catalog_id, asset_id, revision_id)

        await self._create_revision(token, revision_url, imported_by, file_name, data)
        await self._put_master(token, revision_url, data)

        logger.info("uploaded image", catalog_id=catalog_id, asset_id=asset_id, size=len(data))
        return asset_id

    async def _create_revision(
        self,
        token: str,
        revision_url: str,
        imported_by: str,
        file_name: str,
        data: bytes,
    ) -> None:
        content = RevisionContent.new(file_name, imported_by, self.service_id).to_json()
        sha256 = hashlib.sha256(data).hexdigest()
        try:
            await self._http.put_json(token, revision_url, content, sha256)
        except TransportError as exc:
            if exc.status_code == 412:
                logger.warning("duplicate content", sha256=sha256)
                raise DuplicateContentError() from exc
            logger.warning("create revision failed", status=exc.status_code)
            raise _wrap("create revision failed", exc) from exc

    async def _put_master(self, token: str, revision_url: str, data: bytes) -> None:
        try:
            await self._http.put_master(
                token,
                f"{revision_url}/master",
                MASTER_CONTENT_TYPE,
                content_range(0, len(data) - 1, len(data)),
                data,
            )
        except TransportError as exc:
            # the revision record stays behind without a master
            logger.warning("put master failed", revision_url=revision_url, status=exc.status_code)
            raise _wrap("upload failed: put master", exc) from exc

    async def put_master_chunks(
        self,
        token: Optional[str],
        relative_url: str,
        data: bytes,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        content_type: str = MASTER_CONTENT_TYPE,
    ) -> int:
        """Upload a master in ``chunk_size`` slices; returns the number of requests made."""

        token = _require_token(token, "put master failed")
        if not data:
            raise InvalidPayloadError("put master failed: empty master")
        if chunk_size <= 0:
            raise InvalidPayloadError("put master failed: chunk_size must be positive")
        total = len(data)
        requests = 0
        for start in range(0, total, chunk_size):
            end = min(start + chunk_size, total) - 1
            try:
                await self._http.put_master(
                    token,
                    relative_url,
                    content_type,
                    content_range(start, end, total),
                    data[start : end + 1],
                )
            except TransportError as exc:
                raise _wrap(f"put master failed at byte {start}", exc) from exc
            requests += 1
        return requests

    async def upload_image_and_add_to_first_project(
        self,
        token: Optional[str],
        imported_by: str,
        catalog_id: str,
        file_name: str,
        data: bytes,
    ) -> str:
        """Upload an image and attach it to the first project album we own."""

        projects = await self.get_projects(token, catalog_id)
        resources = projects["resources"]
        if not resources:
            raise EmptyResultError("add asset to album failed: no first project")
        album_id = resources[0]["id"]

        asset_id = await self.upload_image(token, imported_by, catalog_id, file_name, data)

        content = AlbumAssets.of(asset_id).to_json()
        try:
            await self._http.put_json(token, f"/v2/catalogs/{catalog_id}/albums/{album_id}/assets", content)
        except TransportError as exc:
            logger.warning("add asset to album failed", asset_id=asset_id, album_id=album_id, status=exc.status_code)
            raise _wrap("add asset to album failed", exc) from exc

        logger.info("added asset to project", asset_id=asset_id, album_id=album_id)
        return asset_id


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "HEALTH_DOWN",
    "HEALTH_UP",
    "LightroomClient",
    "MASTER_CONTENT_TYPE",
]
