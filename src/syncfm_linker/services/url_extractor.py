"""Find the first supported music link in free-form message text."""

import re
from typing import Optional

from .service_classifier import ServiceHosts, detect_music_service

_LEADING_PUNCTUATION = re.compile(r"^[<({\[`'\"]+")
_TRAILING_PUNCTUATION = re.compile(r"[>)}\]'\".,!?;:]+$")
_HTTP_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def sanitize_potential_url(candidate: str) -> str:
    """Strip wrapping brackets, quotes and trailing punctuation from a token."""

    without_leading = _LEADING_PUNCTUATION.sub("", candidate)
    return _TRAILING_PUNCTUATION.sub("", without_leading)


def ensure_http_scheme(value: str) -> str:
    """Prefix ``https://`` unless the value already has an http(s) scheme."""

    if _HTTP_SCHEME.match(value):
        return value
    return f"https://{value}"


def extract_music_url(
    content: Optional[str],
    *,
    enable_standard_youtube: bool = False,
    hosts: Optional[ServiceHosts] = None,
) -> Optional[str]:
    """Return the leftmost token of ``content`` that is a supported music URL."""

    if not content:
        return None

    for token in content.split():
        candidate = sanitize_potential_url(token)
        if not candidate:
            continue

        normalized = ensure_http_scheme(candidate)
        service = detect_music_service(
            normalized,
            enable_standard_youtube=enable_standard_youtube,
            hosts=hosts,
        )
        if service is not None:
            return normalized

    return None
