"""Client integrations for external services."""

from .syncfm import (
    SyncFMAPIError,
    SyncFMClient,
    SyncFMClientConfigError,
    build_syncfm_client,
)

__all__ = [
    "SyncFMAPIError",
    "SyncFMClient",
    "SyncFMClientConfigError",
    "build_syncfm_client",
]
