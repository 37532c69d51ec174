"""Pydantic models representing SyncFM API payloads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityKind(str, Enum):
    """Kind of music entity a SyncFM record describes."""

    SONG = "song"
    ALBUM = "album"
    ARTIST = "artist"


class ExternalIdKey(str, Enum):
    """Keys SyncFM uses in ``externalIds`` for each streaming service."""

    SPOTIFY = "Spotify"
    APPLE_MUSIC = "AppleMusic"
    YOUTUBE = "YouTube"


def _scalar_text(value: Any) -> Optional[str]:
    """Return ``value`` as stripped text when it is a non-empty string or a number."""

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class SyncFMEntity(BaseModel):
    """Canonical song, album or artist record returned by SyncFM.

    Unknown fields are preserved so the entity can be posted back to
    ``/api/createUrl`` exactly as it was received.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    sync_id: str = Field(alias="syncId")
    # Display fields are kept as received; the API does not pin their shapes.
    shortcode: Any = None
    title: Any = None
    name: Any = None
    artists: Any = None
    album: Any = None
    image_url: Any = Field(default=None, alias="imageUrl")
    external_ids: Any = Field(default=None, alias="externalIds")
    songs: Any = None

    @field_validator("sync_id", mode="before")
    @classmethod
    def _coerce_sync_id(cls, value: Any) -> str:
        text = _scalar_text(value)
        if text is None:
            raise ValueError("syncId must be a non-empty string or number")
        return text

    @property
    def share_code(self) -> Optional[str]:
        """Shortcode usable in a short link, if the entity carries one."""

        return _scalar_text(self.shortcode)

    @property
    def has_tracks(self) -> bool:
        return isinstance(self.songs, list) and len(self.songs) > 0

    def external_id(self, key: ExternalIdKey | str) -> str | None:
        """Return the native identifier for ``key`` when present and truthy."""

        if not isinstance(self.external_ids, Mapping):
            return None
        lookup = key.value if isinstance(key, ExternalIdKey) else key
        value = self.external_ids.get(lookup)
        if not value:
            return None
        return str(value)

    def available_services(self) -> list[str]:
        if not isinstance(self.external_ids, Mapping):
            return []
        return sorted(str(key) for key in self.external_ids)

    def to_payload(self) -> dict[str, Any]:
        """Serialize the entity with SyncFM's field names, keeping explicit nulls."""

        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


@dataclass(slots=True, frozen=True)
class ConversionResult:
    """A resolved entity together with its canonical SyncFM link."""

    link: str
    entity: SyncFMEntity
    kind: EntityKind


@dataclass(slots=True, frozen=True)
class ServiceLink:
    """A link to the same entity on one service, with a display label."""

    service: str
    label: str
    url: str
