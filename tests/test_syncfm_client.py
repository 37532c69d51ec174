import json
from types import TracebackType
from typing import Any

import httpx
import pytest

from syncfm_linker.clients import (
    SyncFMAPIError,
    SyncFMClient,
    SyncFMClientConfigError,
    build_syncfm_client,
)
from syncfm_linker.config.settings import AppSettings
from syncfm_linker.schemas import EntityKind, SyncFMEntity


def test_build_syncfm_client_uses_settings() -> None:
    settings = AppSettings.model_validate(
        {"SYNCFM_BASE_URL": "https://syncfm.example/", "SYNCFM_TIMEOUT_SECONDS": "3.5"}
    )

    client = build_syncfm_client(settings)

    assert isinstance(client, SyncFMClient)
    assert client.base_url == "https://syncfm.example"
    assert client.timeout == 3.5


@pytest.mark.parametrize(
    "overrides",
    [
        {"SYNCFM_BASE_URL": ""},
        {"SYNCFM_BASE_URL": "ftp://syncfm.example"},
        {"SYNCFM_TIMEOUT_SECONDS": "0"},
    ],
)
def test_build_syncfm_client_rejects_invalid_settings(overrides: dict[str, str]) -> None:
    settings = AppSettings.model_validate(overrides)

    with pytest.raises(SyncFMClientConfigError):
        build_syncfm_client(settings)


def test_share_link_forms(syncfm_client: SyncFMClient) -> None:
    assert syncfm_client.short_link("abc12") == "https://syncfm.test/s/abc12"
    assert syncfm_client.long_link("id with/slash") == (
        "https://syncfm.test/api/handle/syncfm?syncId=id%20with%2Fslash&service=syncfm"
    )


@pytest.mark.asyncio
async def test_lookup_returns_entity(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any]
) -> None:
    source = "https://open.spotify.com/track/4cOdK2wGLETKBW3PvgPWqT?si=x&y=1"

    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/handle/syncfm"
        assert request.url.params["url"] == source
        return httpx.Response(status_code=200, json=song_payload)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        entity = await syncfm_client.lookup(source, http_client=http_client)

    assert isinstance(entity, SyncFMEntity)
    assert entity.sync_id == "sync-123"
    assert entity.shortcode == "abc12"
    assert entity.external_id("YouTube") == "dQw4w9WgXcQ"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(status_code=500, text="upstream exploded"),
        httpx.Response(status_code=404, json={"error": {"message": "Not found"}}),
        httpx.Response(status_code=200, text="<html>not json</html>"),
        httpx.Response(status_code=200, json=["not", "an", "object"]),
        httpx.Response(status_code=200, json={"title": "missing sync id"}),
        httpx.Response(status_code=200, json={"syncId": ""}),
    ],
)
async def test_lookup_raises_on_unusable_response(
    syncfm_client: SyncFMClient, response: httpx.Response
) -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return response

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        with pytest.raises(SyncFMAPIError):
            await syncfm_client.lookup("https://open.spotify.com/track/1", http_client=http_client)


@pytest.mark.asyncio
async def test_lookup_error_includes_detail(syncfm_client: SyncFMClient) -> None:
    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=404, json={"error": {"message": "Track not found"}})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        with pytest.raises(SyncFMAPIError) as exc:
            await syncfm_client.lookup("https://open.spotify.com/track/1", http_client=http_client)

    assert "status=404" in str(exc.value)
    assert "Track not found" in str(exc.value)


@pytest.mark.asyncio
async def test_create_url_posts_entity(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any]
) -> None:
    entity = SyncFMEntity.model_validate(song_payload)

    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/createUrl"
        body = json.loads(request.content.decode("utf-8"))
        assert body["service"] == "applemusic"
        assert body["type"] == "song"
        assert body["input"]["syncId"] == "sync-123"
        assert body["input"]["imageUrl"] == "https://img.example/cover.jpg"
        assert body["input"]["duration"] == 213
        return httpx.Response(status_code=200, json={"url": "https://music.apple.com/song/1"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        url = await syncfm_client.create_url(
            "applemusic", entity, EntityKind.SONG, http_client=http_client
        )

    assert url == "https://music.apple.com/song/1"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": None}, {"url": 42}])
async def test_create_url_returns_none_without_url(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any], body: dict[str, Any]
) -> None:
    entity = SyncFMEntity.model_validate(song_payload)

    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json=body)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        url = await syncfm_client.create_url(
            "spotify", entity, EntityKind.SONG, http_client=http_client
        )

    assert url is None


@pytest.mark.asyncio
async def test_create_url_raises_on_error_status(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any]
) -> None:
    entity = SyncFMEntity.model_validate(song_payload)

    async def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=502, text="bad gateway")

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        with pytest.raises(SyncFMAPIError) as exc:
            await syncfm_client.create_url(
                "ytmusic", entity, EntityKind.SONG, http_client=http_client
            )

    assert "ytmusic" in str(exc.value)
    assert "bad gateway" in str(exc.value)


@pytest.mark.asyncio
async def test_lookup_uses_context_client_with_timeout(
    monkeypatch: pytest.MonkeyPatch, song_payload: dict[str, Any]
) -> None:
    client = SyncFMClient(base_url="https://syncfm.test", timeout=4.0)

    class DummyAsyncClient:
        def __init__(self, **kwargs: object) -> None:
            self.kwargs = kwargs
            self.calls: list[tuple[str, dict[str, str]]] = []

        async def __aenter__(self) -> "DummyAsyncClient":
            return self

        async def __aexit__(
            self,
            exc_type: type[BaseException] | None,
            exc: BaseException | None,
            tb: TracebackType | None,
        ) -> bool:
            return False

        async def get(
            self, url: str, *, params: dict[str, str], **kwargs: object
        ) -> httpx.Response:
            self.calls.append((url, params))
            return httpx.Response(status_code=200, json=song_payload)

    created_clients: list[DummyAsyncClient] = []

    def fake_async_client(*args: object, **kwargs: object) -> DummyAsyncClient:
        instance = DummyAsyncClient(**kwargs)
        created_clients.append(instance)
        return instance

    monkeypatch.setattr(httpx, "AsyncClient", fake_async_client)

    await client.lookup("https://open.spotify.com/track/1")
    await client.lookup("https://open.spotify.com/track/1", timeout=0.5)

    assert [c.kwargs.get("timeout") for c in created_clients] == [4.0, 0.5]
    assert created_clients[0].calls[0][0] == "https://syncfm.test/api/handle/syncfm"


@pytest.mark.asyncio
async def test_lookup_applies_timeout_to_injected_client(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any]
) -> None:
    seen_timeouts: list[dict[str, Any]] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen_timeouts.append(request.extensions["timeout"])
        return httpx.Response(status_code=200, json=song_payload)

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport, timeout=30.0) as http_client:
        await syncfm_client.lookup(
            "https://open.spotify.com/track/1", http_client=http_client, timeout=2.5
        )
        await syncfm_client.lookup("https://open.spotify.com/track/1", http_client=http_client)

    assert seen_timeouts[0] == {"connect": 2.5, "read": 2.5, "write": 2.5, "pool": 2.5}
    assert seen_timeouts[1] == {"connect": 30.0, "read": 30.0, "write": 30.0, "pool": 30.0}


@pytest.mark.asyncio
async def test_create_url_applies_timeout_to_injected_client(
    syncfm_client: SyncFMClient, song_payload: dict[str, Any]
) -> None:
    entity = SyncFMEntity.model_validate(song_payload)
    seen_timeouts: list[dict[str, Any]] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen_timeouts.append(request.extensions["timeout"])
        return httpx.Response(status_code=200, json={"url": "https://open.spotify.com/t"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        await syncfm_client.create_url(
            "spotify", entity, EntityKind.SONG, http_client=http_client, timeout=1.5
        )

    assert seen_timeouts == [{"connect": 1.5, "read": 1.5, "write": 1.5, "pool": 1.5}]


@pytest.mark.asyncio
async def test_create_url_sends_entity_as_received(syncfm_client: SyncFMClient) -> None:
    received = {
        "syncId": "sync-9",
        "title": "Song",
        "album": None,
        "artists": [{"name": "A"}],
        "externalIds": {"Spotify": "sp-1"},
        "popularity": 71,
    }
    entity = SyncFMEntity.model_validate(received)
    bodies: list[dict[str, Any]] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content.decode("utf-8")))
        return httpx.Response(status_code=200, json={"url": "https://open.spotify.com/t"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(transport=transport) as http_client:
        await syncfm_client.create_url(
            "spotify", entity, EntityKind.SONG, http_client=http_client
        )

    assert bodies[0]["input"] == received


@pytest.mark.parametrize("value", [0, False, "", None, [], {}])
def test_external_id_ignores_falsy_values(value: Any) -> None:
    entity = SyncFMEntity.model_validate({"syncId": "s", "externalIds": {"Spotify": value}})

    assert entity.external_id("Spotify") is None


def test_external_id_ignores_non_mapping_external_ids() -> None:
    entity = SyncFMEntity.model_validate({"syncId": "s", "externalIds": ["Spotify"]})

    assert entity.external_id("Spotify") is None
    assert entity.available_services() == []
