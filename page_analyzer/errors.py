"""page_analyzer.errors: исключения, пересекающие границу ядро / веб-слой."""

from __future__ import annotations

from enum import Enum

__all__ = ["PageAnalyzerError", "ValidationErrorKind", "UrlValidationError", "NotFoundError"]


class PageAnalyzerError(Exception):
    """Base class for the project's domain errors."""


class ValidationErrorKind(str, Enum):
    EMPTY = "empty"
    MALFORMED = "malformed"
    TOO_LONG = "too_long"
    UNSUPPORTED_SCHEME = "unsupported_scheme"


_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.EMPTY: "URL must not be empty",
    ValidationErrorKind.MALFORMED: "Invalid URL",
    ValidationErrorKind.TOO_LONG: "URL is too long",
    ValidationErrorKind.UNSUPPORTED_SCHEME: "Only http and https URLs are supported",
}


class UrlValidationError(PageAnalyzerError, ValueError):
    """Raised when user input cannot be turned into a canonical URL."""

    def __init__(self, kind: ValidationErrorKind, raw: str | None = None) -> None:
        self.kind = kind
        self.raw = raw
        super().__init__(_MESSAGES[kind])


class NotFoundError(PageAnalyzerError, LookupError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, ident: object) -> None:
        self.entity = entity
        self.ident = ident
        super().__init__(f"{entity} with id = {ident} not found")
