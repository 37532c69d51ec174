"""Resolve a music link to its canonical SyncFM entity."""

from typing import Optional

import httpx

from syncfm_linker.clients import SyncFMAPIError, SyncFMClient
from syncfm_linker.logger import get_logger
from syncfm_linker.schemas import ConversionResult, EntityKind, SyncFMEntity
from syncfm_linker.telemetry import NULL_TELEMETRY, TelemetrySink

logger = get_logger(__name__)


def infer_entity_kind(entity: SyncFMEntity) -> EntityKind:
    """Guess whether the entity is an album, artist or song from its fields.

    Albums carry a track list; artists carry a name but no title.
    """

    if entity.has_tracks:
        return EntityKind.ALBUM
    if entity.name and not entity.title:
        return EntityKind.ARTIST
    return EntityKind.SONG


def build_share_link(client: SyncFMClient, entity: SyncFMEntity) -> str:
    """Return the short link when a shortcode exists, else the long lookup link."""

    if entity.share_code:
        return client.short_link(entity.share_code)
    return client.long_link(entity.sync_id)


async def resolve_entity(
    client: SyncFMClient,
    url: str,
    *,
    telemetry: Optional[TelemetrySink] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
) -> Optional[ConversionResult]:
    """Look up ``url`` on SyncFM and build the conversion result.

    Failures are logged and reported to ``telemetry``; the caller only sees None.
    """

    sink = telemetry or NULL_TELEMETRY

    try:
        entity = await client.lookup(url, http_client=http_client, timeout=timeout)
    except (SyncFMAPIError, httpx.HTTPError) as exc:
        logger.exception("SyncFM lookup failed for url: %s", url)
        sink.capture_exception(exc)
        return None

    kind = infer_entity_kind(entity)
    link = build_share_link(client, entity)
    logger.info(
        "SyncFM entity resolved: sync_id=%s, kind=%s, link=%s",
        entity.sync_id,
        kind.value,
        link,
    )
    return ConversionResult(link=link, entity=entity, kind=kind)
