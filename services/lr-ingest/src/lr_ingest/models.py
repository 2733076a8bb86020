"""Pydantic models for the JSON documents written to the Lightroom services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_CAPTURE_DATE = "0000-00-00T00:00:00"


def utc_timestamp() -> str:
    """Current time as ISO 8601 with millisecond precision and a ``Z`` suffix."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LrModel(BaseModel):
    """Base model serialising with the service's camelCase field names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class PublishInfo(LrModel):
    version: int = 2
    service_id: str = Field(alias="serviceId")


class ProjectPayload(LrModel):
    user_created: str = Field(alias="userCreated")
    user_updated: str = Field(alias="userUpdated")
    name: str
    publish_info: PublishInfo = Field(alias="publishInfo")


class ProjectAlbum(LrModel):
    """Album of subtype ``project`` owned by this integration."""

    subtype: str = "project"
    service_id: str = Field(alias="serviceId")
    payload: ProjectPayload

    @classmethod
    def new(cls, album_id: str, service_id: str, timestamp: Optional[str] = None) -> "ProjectAlbum":
        timestamp = timestamp or utc_timestamp()
        return cls(
            service_id=service_id,
            payload=ProjectPayload(
                user_created=timestamp,
                user_updated=timestamp,
                # the album id doubles as the display name
                name=album_id,
                publish_info=PublishInfo(service_id=service_id),
            ),
        )


class ImportSource(LrModel):
    file_name: str = Field(alias="fileName")
    import_timestamp: str = Field(alias="importTimestamp")
    imported_by: str = Field(alias="importedBy")
    imported_on_device: str = Field(alias="importedOnDevice")


class RevisionPayload(LrModel):
    capture_date: str = Field(default=UNKNOWN_CAPTURE_DATE, alias="captureDate")
    user_created: str = Field(alias="userCreated")
    user_updated: str = Field(alias="userUpdated")
    import_source: ImportSource = Field(alias="importSource")


class RevisionContent(LrModel):
    """Metadata record created ahead of an image master upload."""

    subtype: str = "image"
    payload: RevisionPayload

    @classmethod
    def new(
        cls,
        file_name: str,
        imported_by: str,
        device: str,
        timestamp: Optional[str] = None,
    ) -> "RevisionContent":
        timestamp = timestamp or utc_timestamp()
        return cls(
            payload=RevisionPayload(
                user_created=timestamp,
                user_updated=timestamp,
                import_source=ImportSource(
                    file_name=file_name,
                    import_timestamp=timestamp,
                    imported_by=imported_by,
                    imported_on_device=device,
                ),
            )
        )


class AssetRef(LrModel):
    id: str


class AlbumAssets(LrModel):
    resources: List[AssetRef]

    @classmethod
    def of(cls, *asset_ids: str) -> "AlbumAssets":
        return cls(resources=[AssetRef(id=asset_id) for asset_id in asset_ids])


def is_service_project(resource: Dict[str, Any], service_id: str) -> bool:
    """True when an album resource was published by ``service_id``."""

    payload = resource.get("payload") or {}
    publish_info = payload.get("publishInfo") or {}
    return bool(publish_info) and publish_info.get("serviceId") == service_id


__all__ = [
    "AlbumAssets",
    "AssetRef",
    "ImportSource",
    "ProjectAlbum",
    "ProjectPayload",
    "PublishInfo",
    "RevisionContent",
    "RevisionPayload",
    "UNKNOWN_CAPTURE_DATE",
    "is_service_project",
    "utc_timestamp",
]
