"""Optional analytics and error-reporting sinks.

The pipeline receives a sink as an argument instead of reaching for a
process-wide client, so it can run without any telemetry at all.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from syncfm_linker.config.settings import AppSettings
from syncfm_linker.logger import get_logger


class TelemetrySink(Protocol):
    """Destination for analytics events and captured exceptions."""

    def capture(
        self,
        event: str,
        distinct_id: Optional[str],
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None: ...

    def capture_exception(self, exc: BaseException) -> None: ...


class NullTelemetry:
    """Sink that drops everything."""

    def capture(
        self,
        event: str,
        distinct_id: Optional[str],
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        return None

    def capture_exception(self, exc: BaseException) -> None:
        return None


class LoggingTelemetry:
    """Sink that writes events and exceptions to the application log."""

    def __init__(self, logger_name: str = "syncfm_linker.telemetry") -> None:
        self._logger = get_logger(logger_name)

    def capture(
        self,
        event: str,
        distinct_id: Optional[str],
        properties: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if not distinct_id:
            return

        self._logger.info(
            "Telemetry event: %s | distinct_id=%s | properties=%s",
            event,
            distinct_id,
            dict(properties or {}),
        )

    def capture_exception(self, exc: BaseException) -> None:
        self._logger.warning(
            "Telemetry exception: %s: %s", type(exc).__name__, exc
        )


NULL_TELEMETRY = NullTelemetry()


def build_telemetry(settings: AppSettings) -> TelemetrySink:
    """Return the telemetry sink selected by the application settings."""

    if settings.analytics_enabled:
        return LoggingTelemetry()
    return NULL_TELEMETRY
