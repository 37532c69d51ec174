"""Map music URLs to the streaming service that hosts them."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence
from urllib.parse import urlsplit


class MusicService(str, Enum):
    """Streaming services a source link can come from."""

    SPOTIFY = "spotify"
    APPLE_MUSIC = "applemusic"
    YOUTUBE_MUSIC = "ytmusic"


ServiceHosts = Mapping[MusicService, Sequence[str]]

_BASE_SERVICE_HOSTS: ServiceHosts = MappingProxyType(
    {
        MusicService.SPOTIFY: ("spotify.com",),
        MusicService.APPLE_MUSIC: ("music.apple.com",),
        MusicService.YOUTUBE_MUSIC: ("music.youtube.com",),
    }
)

# Extra hosts accepted only when plain YouTube links are opted in.
STANDARD_YOUTUBE_HOSTS: tuple[str, ...] = ("youtube.com", "youtu.be")


def get_supported_service_hosts(enable_standard_youtube: bool = False) -> ServiceHosts:
    """Return the ordered host-suffix table used for classification."""

    if not enable_standard_youtube:
        return _BASE_SERVICE_HOSTS

    hosts = dict(_BASE_SERVICE_HOSTS)
    hosts[MusicService.YOUTUBE_MUSIC] = (
        *hosts[MusicService.YOUTUBE_MUSIC],
        *STANDARD_YOUTUBE_HOSTS,
    )
    return MappingProxyType(hosts)


def host_matches(hostname: str, suffix: str) -> bool:
    """Return True if ``hostname`` is ``suffix`` or one of its subdomains."""

    return hostname == suffix or hostname.endswith(f".{suffix}")


def detect_music_service(
    url: str,
    *,
    enable_standard_youtube: bool = False,
    hosts: Optional[ServiceHosts] = None,
) -> Optional[MusicService]:
    """Return the service whose host table matches ``url``, or None.

    Malformed URLs yield None rather than raising.
    """

    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None

    if not hostname:
        return None

    hostname = hostname.lower()
    table = hosts if hosts is not None else get_supported_service_hosts(enable_standard_youtube)

    for service, suffixes in table.items():
        if any(host_matches(hostname, suffix.lower()) for suffix in suffixes):
            return service

    return None


classify = detect_music_service
