"""Request and response bodies for the HTTP API."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ConvertRequest(BaseModel):
    """Free-form message text to scan for a music link."""

    text: str
    distinct_id: Optional[str] = None


class ServiceLinkOut(BaseModel):
    service: str
    label: str
    url: str


class ConvertResponse(BaseModel):
    """Outcome of a conversion; ``status`` distinguishes the terminal states."""

    status: str
    source_url: Optional[str] = None
    source_service: Optional[str] = None
    kind: Optional[str] = None
    link: Optional[str] = None
    entity: Optional[dict[str, Any]] = None
    links: list[ServiceLinkOut] = Field(default_factory=list)
    only_canonical: Optional[bool] = None
    duration_ms: Optional[float] = None


class ClassifyResponse(BaseModel):
    url: str
    service: Optional[str] = None
