"""
Check repository: persistence of canonical URLs and their append-only checks.

Every operation opens its own session, so a pooled connection is held only
for the duration of one call and is released on every exit path,
cancellation included.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from page_analyzer.checker.models import AnalysisResult
from page_analyzer.db.models import Check, Url
from page_analyzer.errors import NotFoundError
from page_analyzer.logger import get_logger

log = get_logger("repository")

_NEWEST_FIRST = (Check.created_at.desc(), Check.id.desc())

#: ids outside a signed 32-bit INTEGER can never name a stored row
MAX_ID = 2**31 - 1


def _storable_id(url_id: int) -> bool:
    return 0 < url_id <= MAX_ID


class CheckRepository:
    """Async repository over the ``urls`` / ``checks`` tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._sessions = session_factory

    # ------------------------------------------------------------------ urls

    async def find_url(self, url_id: int) -> Optional[Url]:
        if not _storable_id(url_id):
            return None
        async with self._sessions() as session:
            return await session.get(Url, url_id)

    async def find_url_by_name(self, name: str) -> Optional[Url]:
        async with self._sessions() as session:
            result = await session.execute(select(Url).where(Url.name == name))
            return result.scalar_one_or_none()

    async def find_or_create_url(self, name: str) -> Url:
        """Return the row for *name*, inserting it if absent."""
        url, _created = await self.find_or_create(name)
        return url

    async def find_or_create(self, name: str) -> Tuple[Url, bool]:
        """Like :meth:`find_or_create_url`, plus whether this call inserted the row.

        The unique constraint on ``urls.name`` decides races: the loser's
        insert fails with IntegrityError and the winner's row is returned
        with ``False``.
        """
        existing = await self.find_url_by_name(name)
        if existing is not None:
            return existing, False
        try:
            async with self._sessions.begin() as session:
                url = Url(name=name)
                session.add(url)
            log.info("Added url %s (id=%s)", name, url.id)
            return url, True
        except IntegrityError:
            log.debug("Concurrent insert of %s, re-reading winner", name)
        winner = await self.find_url_by_name(name)
        if winner is None:
            raise RuntimeError(f"url {name!r} conflicted on insert but cannot be read back")
        return winner, False

    async def list_urls(self) -> List[Tuple[Url, Optional[Check]]]:
        """All urls by id ascending, each with its latest check (or None)."""
        ranked = select(
            Check,
            func.row_number()
            .over(partition_by=Check.url_id, order_by=_NEWEST_FIRST)
            .label("row_num"),
        ).subquery()
        latest = aliased(Check, ranked)
        stmt = (
            select(Url, latest)
            .outerjoin(latest, and_(latest.url_id == Url.id, ranked.c.row_num == 1))
            .order_by(Url.id.asc())
        )
        async with self._sessions() as session:
            result = await session.execute(stmt)
            return [(url, check) for url, check in result.all()]

    async def get_url_with_checks(self, url_id: int) -> Tuple[Url, List[Check]]:
        if not _storable_id(url_id):
            raise NotFoundError("Url", url_id)
        async with self._sessions() as session:
            url = await session.get(Url, url_id)
            if url is None:
                raise NotFoundError("Url", url_id)
            checks = await self._checks_of(session, url_id)
        return url, checks

    # ---------------------------------------------------------------- checks

    async def list_checks(self, url_id: int) -> List[Check]:
        if not _storable_id(url_id):
            return []
        async with self._sessions() as session:
            return await self._checks_of(session, url_id)

    async def add_check(self, url_id: int, result: AnalysisResult) -> Check:
        """Append one immutable check row; NotFoundError if the url is missing."""
        if not _storable_id(url_id):
            raise NotFoundError("Url", url_id)
        async with self._sessions.begin() as session:
            if await session.get(Url, url_id) is None:
                raise NotFoundError("Url", url_id)
            check = Check(
                url_id=url_id,
                status_code=result.status_code,
                title=result.title,
                h1=result.h1,
                description=result.description,
                error=result.error,
            )
            session.add(check)
        log.debug("Stored check id=%s for url id=%s", check.id, url_id)
        return check

    @staticmethod
    async def _checks_of(session: AsyncSession, url_id: int) -> List[Check]:
        result = await session.execute(
            select(Check).where(Check.url_id == url_id).order_by(*_NEWEST_FIRST)
        )
        return list(result.scalars().all())
