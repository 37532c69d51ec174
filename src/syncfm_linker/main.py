from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from syncfm_linker.api import convert_router
from syncfm_linker.api.convert import get_syncfm_client_from_request
from syncfm_linker.clients import (
    SyncFMAPIError,
    SyncFMClient,
    SyncFMClientConfigError,
    build_syncfm_client,
)
from syncfm_linker.config.settings import AppSettings, get_settings
from syncfm_linker.logger import configure_logging, get_logger, parse_log_level
from syncfm_linker.telemetry import build_telemetry

logger = get_logger(__name__)

PROBE_TRACK_URL = "https://open.spotify.com/track/3n3Ppam7vgaVa1iaRUc9Lp"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""

    settings = get_settings()
    apply_log_level(settings)
    logger.info("SyncFM Linker service is starting up")
    validate_critical_settings(settings)

    app.state.telemetry = build_telemetry(settings)

    try:
        app.state.syncfm_client = build_syncfm_client(settings)
        logger.info("SyncFM client initialized for %s", settings.syncfm_base_url)
    except SyncFMClientConfigError:
        app.state.syncfm_client = None
        logger.exception("SyncFM client not initialized due to invalid configuration")

    try:
        yield
    finally:
        app.state.syncfm_client = None
        app.state.telemetry = None
        logger.info("SyncFM Linker service is shutting down")


app = FastAPI(title="SyncFM Linker", version="0.1.0", lifespan=lifespan)
app.include_router(convert_router)


@app.get("/health", summary="Health check")
async def health_check() -> JSONResponse:
    """Simple endpoint to verify the service is running."""

    return JSONResponse(content={"status": "ok"})


@app.get("/health/syncfm", summary="SyncFM API check")
async def syncfm_health_check(request: Request) -> JSONResponse:
    """Verify the SyncFM lookup endpoint answers with a usable entity."""

    client = get_syncfm_client_from_request(request)
    if client is None:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "detail": "SyncFM client is not configured"},
        )

    content = await probe_syncfm_api(client)
    status_code = (
        status.HTTP_200_OK if content["status"] == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=content)


async def probe_syncfm_api(
    client: SyncFMClient, *, http_client: httpx.AsyncClient | None = None
) -> dict[str, Any]:
    """Resolve a known track and report whether SyncFM returned a shortcode."""

    try:
        entity = await client.lookup(PROBE_TRACK_URL, http_client=http_client)
    except (SyncFMAPIError, httpx.HTTPError) as exc:
        logger.warning("SyncFM API check failed: %s", exc)
        return {"status": "unavailable", "detail": str(exc)}

    if not entity.share_code:
        logger.warning("SyncFM API responded but no shortcode in response")
        return {"status": "unavailable", "detail": "SyncFM response has no shortcode"}

    logger.info("SyncFM API check succeeded: shortcode=%s", entity.share_code)
    return {
        "status": "ok",
        "shortcode": entity.share_code,
        "link": client.short_link(entity.share_code),
    }


def validate_critical_settings(settings: AppSettings) -> None:
    """Log configuration problems that would prevent conversions."""

    problems: list[str] = []
    base_url = (settings.syncfm_base_url or "").strip()
    if not base_url:
        problems.append("SYNCFM_BASE_URL is empty")
    elif not base_url.lower().startswith(("http://", "https://")):
        problems.append("SYNCFM_BASE_URL must start with http:// or https://")
    if settings.syncfm_timeout_seconds <= 0:
        problems.append("SYNCFM_TIMEOUT_SECONDS must be positive")
    try:
        parse_log_level(settings.log_level)
    except ValueError:
        problems.append(f"LOG_LEVEL is not a known level: {settings.log_level}")

    if problems:
        logger.warning("Invalid configuration: %s", "; ".join(problems))
    else:
        logger.info(
            "Configuration valid (standard YouTube links %s)",
            "enabled" if settings.enable_standard_youtube else "disabled",
        )


def apply_log_level(settings: AppSettings) -> None:
    """Apply ``LOG_LEVEL`` to the root logger, keeping the current level when unknown."""

    try:
        configure_logging(settings.log_level)
    except ValueError:
        logger.warning("Ignoring unknown LOG_LEVEL: %s", settings.log_level)
