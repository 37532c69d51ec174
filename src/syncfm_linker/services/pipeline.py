"""End-to-end conversion of a chat message into cross-service music links."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import httpx

from syncfm_linker.clients import SyncFMClient
from syncfm_linker.logger import get_logger
from syncfm_linker.schemas import ConversionResult, ServiceLink
from syncfm_linker.telemetry import NULL_TELEMETRY, TelemetrySink

from .entity_resolver import resolve_entity
from .link_builder import build_service_links
from .service_classifier import MusicService, detect_music_service
from .url_extractor import extract_music_url

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    RESOLVING = "resolving"
    BUILDING_LINKS = "building-links"
    DONE = "done"
    FAILED = "failed"


class FailureReason(str, Enum):
    """Why a conversion ended without a result."""

    NO_LINK_FOUND = "no-link-found"
    RESOLUTION_FAILED = "resolution-failed"


@dataclass(slots=True, frozen=True)
class PipelineFailure:
    reason: FailureReason
    stage: PipelineStage
    source_url: Optional[str] = None
    source_service: Optional[MusicService] = None
    duration_ms: Optional[float] = None


@dataclass(slots=True, frozen=True)
class PipelineSuccess:
    source_url: str
    source_service: MusicService
    conversion: ConversionResult
    links: list[ServiceLink] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def only_canonical(self) -> bool:
        """True when no link other than the canonical SyncFM one was built."""

        return len(self.links) <= 1


PipelineOutcome = Union[PipelineSuccess, PipelineFailure]


async def convert_message(
    content: Optional[str],
    *,
    client: SyncFMClient,
    enable_standard_youtube: bool = False,
    telemetry: Optional[TelemetrySink] = None,
    distinct_id: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> PipelineOutcome:
    """Run extraction, classification, resolution and link building for one message."""

    sink = telemetry or NULL_TELEMETRY

    stage = PipelineStage.EXTRACTING
    source_url = extract_music_url(content, enable_standard_youtube=enable_standard_youtube)
    if source_url is None:
        logger.info("No supported music link found in message")
        sink.capture("syncfm-no-supported-link", distinct_id)
        return PipelineFailure(reason=FailureReason.NO_LINK_FOUND, stage=stage)

    stage = PipelineStage.CLASSIFYING
    source_service = detect_music_service(
        source_url, enable_standard_youtube=enable_standard_youtube
    )
    if source_service is None:  # pragma: no cover - extraction only returns classified URLs
        return PipelineFailure(reason=FailureReason.NO_LINK_FOUND, stage=stage)

    logger.info("Converting %s link: %s", source_service.value, source_url)
    sink.capture(
        "syncfm-conversion-start",
        distinct_id,
        {"sourceService": source_service.value, "sourceUrl": source_url},
    )

    stage = PipelineStage.RESOLVING
    started = time.perf_counter()
    conversion = await resolve_entity(
        client,
        source_url,
        telemetry=sink,
        http_client=http_client,
        timeout=timeout,
    )
    duration_ms = max(0.0, (time.perf_counter() - started) * 1000)

    if conversion is None:
        logger.warning("SyncFM conversion failed for %s", source_url)
        sink.capture(
            "syncfm-conversion-failed",
            distinct_id,
            {
                "sourceService": source_service.value,
                "sourceUrl": source_url,
                "durationMs": duration_ms,
            },
        )
        return PipelineFailure(
            reason=FailureReason.RESOLUTION_FAILED,
            stage=stage,
            source_url=source_url,
            source_service=source_service,
            duration_ms=duration_ms,
        )

    stage = PipelineStage.BUILDING_LINKS
    links = await build_service_links(
        client,
        conversion,
        telemetry=sink,
        http_client=http_client,
        timeout=timeout,
    )

    entity = conversion.entity
    sink.capture(
        "syncfm-conversion-success",
        distinct_id,
        {
            "sourceService": source_service.value,
            "syncId": entity.sync_id,
            "entityType": conversion.kind.value,
            "hasShortcode": entity.share_code is not None,
            "availableServices": entity.available_services(),
            "syncfmLink": conversion.link,
            "durationMs": duration_ms,
        },
    )

    return PipelineSuccess(
        source_url=source_url,
        source_service=source_service,
        conversion=conversion,
        links=links,
        duration_ms=duration_ms,
    )
