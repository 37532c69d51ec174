"""Conversion endpoints used by chat-platform integrations."""

from fastapi import APIRouter, HTTPException, Request, status

from syncfm_linker.clients import SyncFMClient
from syncfm_linker.config.settings import load_settings
from syncfm_linker.logger import get_logger
from syncfm_linker.schemas import (
    ClassifyResponse,
    ConvertRequest,
    ConvertResponse,
    ServiceLinkOut,
)
from syncfm_linker.services import (
    PipelineFailure,
    PipelineOutcome,
    classify,
    convert_message,
)
from syncfm_linker.telemetry import NULL_TELEMETRY, TelemetrySink

router = APIRouter(tags=["convert"])
logger = get_logger(__name__)


@router.post("/convert", response_model=ConvertResponse)
async def convert(request: Request, payload: ConvertRequest) -> ConvertResponse:
    """Find the first music link in ``payload.text`` and convert it."""

    client = get_syncfm_client_from_request(request)
    if client is None:
        logger.warning("SyncFM client unavailable; rejecting conversion request")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="SyncFM client is not configured",
        )

    # Read per request so the YouTube opt-in follows the current environment.
    settings = load_settings()
    outcome = await convert_message(
        payload.text,
        client=client,
        enable_standard_youtube=settings.enable_standard_youtube,
        telemetry=get_telemetry_from_request(request),
        distinct_id=payload.distinct_id,
    )
    return build_convert_response(outcome)


@router.get("/classify", response_model=ClassifyResponse)
async def classify_url(url: str) -> ClassifyResponse:
    """Report which streaming service, if any, a URL belongs to."""

    settings = load_settings()
    service = classify(url, enable_standard_youtube=settings.enable_standard_youtube)
    return ClassifyResponse(url=url, service=service.value if service else None)


def build_convert_response(outcome: PipelineOutcome) -> ConvertResponse:
    """Flatten a pipeline outcome into the API response body."""

    if isinstance(outcome, PipelineFailure):
        return ConvertResponse(
            status=outcome.reason.value,
            source_url=outcome.source_url,
            source_service=outcome.source_service.value if outcome.source_service else None,
            duration_ms=outcome.duration_ms,
        )

    conversion = outcome.conversion
    return ConvertResponse(
        status="converted",
        source_url=outcome.source_url,
        source_service=outcome.source_service.value,
        kind=conversion.kind.value,
        link=conversion.link,
        entity=conversion.entity.to_payload(),
        links=[
            ServiceLinkOut(service=link.service, label=link.label, url=link.url)
            for link in outcome.links
        ],
        only_canonical=outcome.only_canonical,
        duration_ms=outcome.duration_ms,
    )


def get_syncfm_client_from_request(request: Request) -> SyncFMClient | None:
    """Return the configured SyncFM client from the FastAPI application state."""

    syncfm_client = getattr(request.app.state, "syncfm_client", None)
    if syncfm_client is None:
        return None
    if not isinstance(syncfm_client, SyncFMClient):
        type_name = type(syncfm_client).__name__
        logger.warning("Unexpected syncfm_client type on app state: %s", type_name)
        return None
    return syncfm_client


def get_telemetry_from_request(request: Request) -> TelemetrySink:
    """Return the telemetry sink from the application state, or a no-op sink."""

    telemetry = getattr(request.app.state, "telemetry", None)
    if telemetry is None:
        return NULL_TELEMETRY
    return telemetry
