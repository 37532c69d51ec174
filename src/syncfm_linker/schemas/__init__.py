"""Shared Pydantic models used across the application."""

from .api import ClassifyResponse, ConvertRequest, ConvertResponse, ServiceLinkOut
from .syncfm import (
    ConversionResult,
    EntityKind,
    ExternalIdKey,
    ServiceLink,
    SyncFMEntity,
)

__all__ = [
    "ClassifyResponse",
    "ConversionResult",
    "ConvertRequest",
    "ConvertResponse",
    "EntityKind",
    "ExternalIdKey",
    "ServiceLink",
    "ServiceLinkOut",
    "SyncFMEntity",
]
