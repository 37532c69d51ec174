"""Thin wrapper around the SyncFM conversion API."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional, cast
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from syncfm_linker.config.settings import AppSettings
from syncfm_linker.schemas.syncfm import EntityKind, SyncFMEntity


class SyncFMClientConfigError(ValueError):
    """Raised when the SyncFM client configuration is missing or invalid."""


class SyncFMAPIError(RuntimeError):
    """Raised when a SyncFM API request fails."""


@dataclass(slots=True, frozen=True)
class SyncFMClient:
    """Async client for the SyncFM lookup and link-building endpoints."""

    base_url: str = "https://syncfm.dev"
    provider: str = "syncfm"
    timeout: Optional[float] = 10.0

    _EMPTY_MAPPING = MappingProxyType({})

    @property
    def handle_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/handle/{self.provider}"

    @property
    def create_url_endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/createUrl"

    def short_link(self, shortcode: str) -> str:
        """Return the compact share link for a shortcode."""

        return f"{self.base_url.rstrip('/')}/s/{quote(shortcode, safe='')}"

    def long_link(self, sync_id: str) -> str:
        """Return the lookup URL that re-resolves an entity by its sync id."""

        return f"{self.handle_url}?syncId={quote(sync_id, safe='')}&service={self.provider}"

    async def lookup(
        self,
        url: str,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> SyncFMEntity:
        """Resolve a streaming-service URL to its canonical SyncFM entity.

        Parameters
        ----------
        url:
            Normalized source URL to look up.
        http_client:
            Optional existing :class:`httpx.AsyncClient` to reuse. When ``None``, a temporary
            client is created.
        timeout:
            Timeout, in seconds, for this request. Applied to an injected ``http_client``
            as a per-request override; a temporary client falls back to the configured
            timeout when ``None``.
        """

        async def _perform_lookup(client: httpx.AsyncClient) -> SyncFMEntity:
            response = await client.get(
                self.handle_url, params={"url": url}, **self._request_options(timeout)
            )

            if not response.is_success:
                raise SyncFMAPIError(
                    "SyncFM lookup request failed: "
                    f"status={response.status_code}, detail={self._error_detail(response)}"
                )

            payload_map = self._json_object(response, "SyncFM lookup")

            try:
                return SyncFMEntity.model_validate(payload_map)
            except ValidationError as exc:
                raise SyncFMAPIError(
                    "SyncFM lookup response missing a usable syncId"
                ) from exc

        if http_client is not None:
            return await _perform_lookup(http_client)

        async with httpx.AsyncClient(timeout=self._resolve_timeout(timeout)) as client:
            return await _perform_lookup(client)

    async def create_url(
        self,
        service: str,
        entity: SyncFMEntity,
        kind: EntityKind,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """Ask SyncFM to build the link for ``entity`` on ``service``.

        Returns ``None`` when the response carries no usable ``url``.
        """

        payload: dict[str, Any] = {
            "service": service,
            "input": entity.to_payload(),
            "type": kind.value,
        }

        async def _post(client: httpx.AsyncClient) -> Optional[str]:
            response = await client.post(
                self.create_url_endpoint, json=payload, **self._request_options(timeout)
            )

            if not response.is_success:
                raise SyncFMAPIError(
                    f"SyncFM createUrl request failed for {service}: "
                    f"status={response.status_code}, detail={self._error_detail(response)}"
                )

            payload_map = self._json_object(response, f"SyncFM createUrl for {service}")

            url_value: Any = payload_map.get("url")
            if not isinstance(url_value, str) or not url_value.strip():
                return None
            return url_value.strip()

        if http_client is not None:
            return await _post(http_client)

        async with httpx.AsyncClient(timeout=self._resolve_timeout(timeout)) as client:
            return await _post(client)

    def _resolve_timeout(self, timeout: Optional[float]) -> Optional[float]:
        return timeout if timeout is not None else self.timeout

    @staticmethod
    def _request_options(timeout: Optional[float]) -> dict[str, Any]:
        # Per-call override; an injected client otherwise keeps its own timeout.
        return {"timeout": timeout} if timeout is not None else {}

    @staticmethod
    def _json_object(response: httpx.Response, context: str) -> Mapping[str, Any]:
        try:
            payload_obj = response.json()
        except ValueError as exc:
            raise SyncFMAPIError(f"{context} response was not valid JSON") from exc

        if not isinstance(payload_obj, Mapping):
            raise SyncFMAPIError(f"{context} response had unexpected format")

        return cast(Mapping[str, Any], payload_obj)

    @classmethod
    def _error_detail(cls, response: httpx.Response) -> str:
        try:
            payload_obj = response.json()
        except ValueError:
            payload_obj = {}

        if isinstance(payload_obj, Mapping):
            payload_map = cast(Mapping[str, Any], payload_obj)
        else:
            payload_map = cls._EMPTY_MAPPING

        error_obj: Any = payload_map.get("error") if payload_map else None
        if isinstance(error_obj, Mapping):
            error_map = cast(Mapping[str, Any], error_obj)
            message = error_map.get("message")
            return str(message) if message is not None else str(dict(error_map))
        return str(error_obj or response.text or response.reason_phrase or "Unknown error")


def build_syncfm_client(settings: AppSettings) -> SyncFMClient:
    """Create a SyncFMClient instance from application settings."""

    base_url = (settings.syncfm_base_url or "").strip()
    if not base_url:
        raise SyncFMClientConfigError("A SyncFM base URL is required to instantiate SyncFMClient")

    if not base_url.lower().startswith(("http://", "https://")):
        raise SyncFMClientConfigError(f"SyncFM base URL must use http or https: {base_url}")

    if settings.syncfm_timeout_seconds <= 0:
        raise SyncFMClientConfigError("SyncFM timeout must be a positive number of seconds")

    return SyncFMClient(
        base_url=base_url.rstrip("/"),
        timeout=settings.syncfm_timeout_seconds,
    )
