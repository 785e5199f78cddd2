# page_analyzer/checker/fetcher.py
"""
Fetcher module: one bounded GET per check, then SEO extraction from the body.

Transport failures are reported as data (:class:`AnalysisResult` with
``status_code=None``), never raised. Cancellation is always propagated.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from page_analyzer.checker.models import AnalysisResult
from page_analyzer.config import AnalyzerConfig
from page_analyzer.logger import get_logger
from page_analyzer.parser.html_parser import extract_seo

log = get_logger("fetcher")


class PageFetcher:
    """Stateless analyzer bound to a shared ClientSession."""

    def __init__(self, session: ClientSession, config: AnalyzerConfig) -> None:
        self.session = session
        self.config = config

    async def analyze(self, url: str, timeout: Optional[float] = None) -> AnalysisResult:
        """
        Fetch *url* once and extract title, h1 and meta description.

        Any HTTP status is recorded; the body of 4xx/5xx responses is parsed
        too. No retries.
        """
        limit = ClientTimeout(total=timeout if timeout is not None else self.config.request_timeout)
        status: Optional[int] = None
        try:
            async with self.session.get(url, timeout=limit, allow_redirects=True) as resp:
                status = resp.status
                body = await resp.text(errors="replace")
        except asyncio.TimeoutError:
            log.warning("Check of %s timed out after %ss", url, limit.total)
            return AnalysisResult.failure(f"Timed out after {limit.total} seconds", status)
        except (ClientError, UnicodeError, LookupError) as exc:
            log.warning("Check of %s failed: %s", url, exc)
            return AnalysisResult.failure(str(exc) or type(exc).__name__, status)

        tags = extract_seo(body)
        log.info("Checked %s -> HTTP %s", url, status)
        return AnalysisResult(
            status_code=status,
            title=tags.title,
            h1=tags.h1,
            description=tags.description,
        )
