from typing import Any

import pytest

from syncfm_linker.clients import SyncFMClient


@pytest.fixture
def syncfm_client() -> SyncFMClient:
    return SyncFMClient(base_url="https://syncfm.test")


@pytest.fixture
def song_payload() -> dict[str, Any]:
    return {
        "syncId": "sync-123",
        "shortcode": "abc12",
        "title": "Never Gonna Give You Up",
        "artists": ["Rick Astley"],
        "album": "Whenever You Need Somebody",
        "imageUrl": "https://img.example/cover.jpg",
        "externalIds": {
            "Spotify": "4cOdK2wGLETKBW3PvgPWqT",
            "AppleMusic": "1559523359",
            "YouTube": "dQw4w9WgXcQ",
        },
        "duration": 213,
    }
