# File: page_analyzer/engine.py
"""page_analyzer.engine: контекст приложения и фасад операций «добавить URL» / «проверить»."""

from __future__ import annotations

from types import TracebackType
from typing import List, Optional, Tuple, Type

from aiohttp import ClientSession, ClientTimeout
from sqlalchemy.ext.asyncio import AsyncEngine

from page_analyzer.checker.fetcher import PageFetcher
from page_analyzer.config import AnalyzerConfig
from page_analyzer.db.models import Check, Url
from page_analyzer.db.repository import CheckRepository
from page_analyzer.db.session import create_engine, create_session_factory, init_schema
from page_analyzer.errors import NotFoundError
from page_analyzer.logger import get_logger
from page_analyzer.normalizer import normalize_url

__all__ = ["AppContext", "PageAnalyzer"]

log = get_logger("engine")


class PageAnalyzer:
    """Фасад для веб-слоя, CLI и тестов: компоненты передаются явно."""

    def __init__(
        self,
        config: AnalyzerConfig,
        repository: CheckRepository,
        fetcher: PageFetcher,
    ) -> None:
        self.config = config
        self.repository = repository
        self.fetcher = fetcher

    async def add_url(self, raw: str | None) -> Tuple[Url, bool]:
        """Нормализует и сохраняет URL; второй элемент: был ли он новым."""
        name = normalize_url(raw, max_length=self.config.max_url_length)
        url, created = await self.repository.find_or_create(name)
        if not created:
            log.info("Url %s already exists (id=%s)", name, url.id)
        return url, created

    async def run_check(self, url_id: int, timeout: Optional[float] = None) -> Check:
        """Запускает проверку сохранённого URL и дописывает её в историю."""
        url = await self.repository.find_url(url_id)
        if url is None:
            raise NotFoundError("Url", url_id)
        result = await self.fetcher.analyze(url.name, timeout=timeout)
        return await self.repository.add_check(url.id, result)

    async def list_urls(self) -> List[Tuple[Url, Optional[Check]]]:
        return await self.repository.list_urls()

    async def get_url(self, url_id: int) -> Tuple[Url, List[Check]]:
        return await self.repository.get_url_with_checks(url_id)


class AppContext:
    """Process-wide resources, built once and threaded into every component."""

    def __init__(
        self,
        config: AnalyzerConfig,
        db_engine: AsyncEngine,
        http: ClientSession,
    ) -> None:
        self.config = config
        self.db_engine = db_engine
        self.http = http
        self.repository = CheckRepository(create_session_factory(db_engine))
        self.fetcher = PageFetcher(http, config)
        self.analyzer = PageAnalyzer(config, self.repository, self.fetcher)

    @classmethod
    async def create(cls, config: AnalyzerConfig) -> AppContext:
        """Must run inside the event loop that will use the context."""
        db_engine = create_engine(config)
        http = ClientSession(
            timeout=ClientTimeout(total=config.request_timeout),
            headers={"User-Agent": config.user_agent},
            raise_for_status=False,
        )
        return cls(config, db_engine, http)

    async def init_schema(self) -> None:
        await init_schema(self.db_engine)

    async def close(self) -> None:
        if not self.http.closed:
            await self.http.close()
        await self.db_engine.dispose()
        log.debug("Application context closed")

    async def __aenter__(self) -> AppContext:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.close()
