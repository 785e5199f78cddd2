# File: page_analyzer/normalizer.py
"""page_analyzer.normalizer: приведение введённого пользователем URL к каноническому виду.

Canonical form is ``scheme://host[:port]``: scheme and host lower-cased,
default ports dropped, userinfo/path/query/fragment discarded.
"""

from __future__ import annotations

from typing import Sequence
from urllib.parse import urlsplit

from page_analyzer.errors import UrlValidationError, ValidationErrorKind
from page_analyzer.logger import get_logger

__all__: Sequence[str] = ("normalize_url", "DEFAULT_PORTS", "MAX_URL_LENGTH")

MAX_URL_LENGTH = 255
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}

log = get_logger("normalizer")


def normalize_url(raw: str | None, max_length: int = MAX_URL_LENGTH) -> str:
    """Возвращает канонический ``scheme://host[:port]`` или бросает UrlValidationError."""
    if raw is None or not raw.strip():
        raise UrlValidationError(ValidationErrorKind.EMPTY, raw)
    candidate = raw.strip()
    if len(candidate) > max_length:
        raise UrlValidationError(ValidationErrorKind.TOO_LONG, raw)

    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        log.debug("Unparsable URL %r: %s", raw, exc)
        raise UrlValidationError(ValidationErrorKind.MALFORMED, raw) from exc

    scheme = parts.scheme.lower()
    if not scheme or not parts.netloc:
        # "example.com" and "not a url" both land here: no scheme or no host
        if scheme and scheme not in DEFAULT_PORTS and candidate.count("://") == 1:
            raise UrlValidationError(ValidationErrorKind.UNSUPPORTED_SCHEME, raw)
        raise UrlValidationError(ValidationErrorKind.MALFORMED, raw)
    if scheme not in DEFAULT_PORTS:
        raise UrlValidationError(ValidationErrorKind.UNSUPPORTED_SCHEME, raw)

    host = parts.hostname or ""
    if not host or any(ch.isspace() for ch in host) or host.strip(".") == "":
        raise UrlValidationError(ValidationErrorKind.MALFORMED, raw)

    try:
        port = parts.port
    except ValueError as exc:
        raise UrlValidationError(ValidationErrorKind.MALFORMED, raw) from exc

    if ":" in host:
        host = f"[{host}]"
    normalized = f"{scheme}://{host}"
    if port is not None and port != DEFAULT_PORTS[scheme]:
        normalized += f":{port}"

    log.debug("Normalized URL: %s -> %s", raw, normalized)
    return normalized
