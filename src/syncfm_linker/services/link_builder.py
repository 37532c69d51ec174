"""Build links to a resolved entity on every supported streaming service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

import httpx

from syncfm_linker.clients import SyncFMAPIError, SyncFMClient
from syncfm_linker.logger import get_logger
from syncfm_linker.schemas import ConversionResult, ExternalIdKey, ServiceLink
from syncfm_linker.telemetry import NULL_TELEMETRY, TelemetrySink

from .service_classifier import MusicService

logger = get_logger(__name__)

CANONICAL_SERVICE = "syncfm"
CANONICAL_LABEL = "Open in SyncFM"


@dataclass(slots=True, frozen=True)
class ServiceLinkTarget:
    label: str
    external_key: ExternalIdKey


SERVICE_LINK_TARGETS: Mapping[MusicService, ServiceLinkTarget] = MappingProxyType(
    {
        MusicService.SPOTIFY: ServiceLinkTarget("Open in Spotify", ExternalIdKey.SPOTIFY),
        MusicService.APPLE_MUSIC: ServiceLinkTarget(
            "Open in Apple Music", ExternalIdKey.APPLE_MUSIC
        ),
        MusicService.YOUTUBE_MUSIC: ServiceLinkTarget(
            "Open in YouTube Music", ExternalIdKey.YOUTUBE
        ),
    }
)


def canonical_link(conversion: ConversionResult) -> ServiceLink:
    return ServiceLink(service=CANONICAL_SERVICE, label=CANONICAL_LABEL, url=conversion.link)


async def build_service_link(
    client: SyncFMClient,
    service: MusicService,
    target: ServiceLinkTarget,
    conversion: ConversionResult,
    *,
    telemetry: TelemetrySink = NULL_TELEMETRY,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> Optional[ServiceLink]:
    """Build the link for one service; any failure yields None."""

    try:
        url = await client.create_url(
            service.value,
            conversion.entity,
            conversion.kind,
            http_client=http_client,
            timeout=timeout,
        )
    except (SyncFMAPIError, httpx.HTTPError) as exc:
        logger.exception(
            "Failed to build %s link for sync_id=%s",
            service.value,
            conversion.entity.sync_id,
        )
        telemetry.capture_exception(exc)
        return None

    if url is None:
        logger.warning(
            "SyncFM createUrl returned no url for %s (sync_id=%s)",
            service.value,
            conversion.entity.sync_id,
        )
        return None

    return ServiceLink(service=service.value, label=target.label, url=url)


async def build_service_links(
    client: SyncFMClient,
    conversion: ConversionResult,
    *,
    telemetry: Optional[TelemetrySink] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    targets: Mapping[MusicService, ServiceLinkTarget] = SERVICE_LINK_TARGETS,
) -> list[ServiceLink]:
    """Return the canonical link followed by every per-service link that could be built.

    Services without an external id on the entity are skipped without a request.
    The remaining requests run concurrently and a failure in one never cancels
    the others.
    """

    sink = telemetry or NULL_TELEMETRY

    pending = []
    for service, target in targets.items():
        if conversion.entity.external_id(target.external_key) is None:
            logger.debug(
                "Skipping %s: entity has no %s id", service.value, target.external_key.value
            )
            continue
        pending.append(
            build_service_link(
                client,
                service,
                target,
                conversion,
                telemetry=sink,
                http_client=http_client,
                timeout=timeout,
            )
        )

    results = await asyncio.gather(*pending)

    links = [canonical_link(conversion)]
    links.extend(link for link in results if link is not None)
    logger.info(
        "Built %d service link(s) for sync_id=%s",
        len(links) - 1,
        conversion.entity.sync_id,
    )
    return links
