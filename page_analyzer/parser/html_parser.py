# === FILE: page_analyzer/parser/html_parser.py ===
"""HTML parsing utilities for Page Analyzer.

Only the SEO signals a check records are extracted:

* title — document ``<title>`` text;
* h1 — text of the first ``<h1>``;
* description — ``content`` of ``<meta name="description">``.

Every extractor is independent and fails closed: a missing or empty element
yields ``None`` and never prevents the other fields from being found.
Malformed markup is handled by BeautifulSoup's tolerant ``html.parser``.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.element import Tag

from page_analyzer.logger import get_logger

__all__: Sequence[str] = ("SeoTags", "extract_seo", "parse_html")

log = get_logger("parser")


@dataclass(frozen=True, slots=True)
class SeoTags:
    """Optional fields extracted from a page body."""

    title: str | None = None
    h1: str | None = None
    description: str | None = None


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None


def _title(soup: BeautifulSoup) -> str | None:
    tag = soup.find("title")
    return _clean(tag.get_text()) if isinstance(tag, Tag) else None


def _h1(soup: BeautifulSoup) -> str | None:
    tag = soup.find("h1")
    return _clean(tag.get_text(" ", strip=True)) if isinstance(tag, Tag) else None


def _description(soup: BeautifulSoup) -> str | None:
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        name = tag.get("name")
        if isinstance(name, str) and name.strip().lower() == "description":
            return _clean(tag.get("content"))
    return None


_EXTRACTORS: dict[str, Callable[[BeautifulSoup], str | None]] = {
    "title": _title,
    "h1": _h1,
    "description": _description,
}


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Build a document tree; never raises on broken markup."""
    return BeautifulSoup(html, "html.parser")


def extract_seo(html: str | bytes | None) -> SeoTags:
    """Extract title, first h1 and meta description from *html*."""
    if not html:
        return SeoTags()
    soup = parse_html(html)
    fields: dict[str, str | None] = {}
    for name, extractor in _EXTRACTORS.items():
        try:
            fields[name] = extractor(soup)
        except (AttributeError, TypeError, ValueError) as exc:  # pragma: no cover
            log.debug("Extractor %s failed: %s", name, exc)
            fields[name] = None
    return SeoTags(**fields)
