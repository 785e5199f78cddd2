# Tests for the async check repository (file-backed SQLite)
from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import func, select

from page_analyzer.checker.models import AnalysisResult
from page_analyzer.db.models import Check, Url
from page_analyzer.db.repository import CheckRepository
from page_analyzer.engine import AppContext
from page_analyzer.errors import NotFoundError


async def count_rows(ctx: AppContext, model) -> int:
    async with ctx.db_engine.connect() as conn:
        return (await conn.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio()
async def test_find_or_create_is_idempotent(repository: CheckRepository):
    first = await repository.find_or_create_url("https://example.com")
    second = await repository.find_or_create_url("https://example.com")
    assert first.id == second.id
    assert first.name == "https://example.com"
    assert first.created_at is not None


@pytest.mark.asyncio()
async def test_concurrent_first_submissions_store_one_row(app_context: AppContext):
    repository = app_context.repository
    urls = await asyncio.gather(
        *(repository.find_or_create_url("https://race.example") for _ in range(10))
    )
    assert len({u.id for u in urls}) == 1
    assert await count_rows(app_context, Url) == 1


@pytest.mark.asyncio()
async def test_lookups(repository: CheckRepository):
    assert await repository.find_url(999999) is None
    assert await repository.find_url_by_name("https://non-existent.example") is None
    assert await repository.list_checks(999999) == []

    url = await repository.find_or_create_url("https://lookup.example")
    assert (await repository.find_url(url.id)).name == "https://lookup.example"
    assert (await repository.find_url_by_name("https://lookup.example")).id == url.id


@pytest.mark.asyncio()
async def test_checks_are_returned_newest_first(repository: CheckRepository):
    url = await repository.find_or_create_url("https://complex-test.com")
    for i in (1, 2, 3):
        await repository.add_check(url.id, AnalysisResult(status_code=200, title=f"Title {i}"))

    found, checks = await repository.get_url_with_checks(url.id)
    assert found.id == url.id
    assert [c.title for c in checks] == ["Title 3", "Title 2", "Title 1"]
    assert checks[0].created_at >= checks[1].created_at >= checks[2].created_at


@pytest.mark.asyncio()
async def test_get_unknown_url_fails(repository: CheckRepository):
    with pytest.raises(NotFoundError):
        await repository.get_url_with_checks(424242)


@pytest.mark.asyncio()
async def test_add_check_for_unknown_url_writes_nothing(app_context: AppContext):
    with pytest.raises(NotFoundError):
        await app_context.repository.add_check(999999, AnalysisResult(status_code=200))
    assert await count_rows(app_context, Check) == 0


@pytest.mark.asyncio()
async def test_failed_fetch_still_creates_one_check(app_context: AppContext):
    repository = app_context.repository
    url = await repository.find_or_create_url("http://unreachable.example")
    check = await repository.add_check(url.id, AnalysisResult.failure("Connection refused"))

    assert check.id is not None
    assert check.status_code is None
    assert check.title is None and check.h1 is None and check.description is None
    assert check.error == "Connection refused"
    assert await count_rows(app_context, Check) == 1


@pytest.mark.asyncio()
async def test_listing_pairs_urls_with_latest_check(repository: CheckRepository):
    a = await repository.find_or_create_url("https://a.example")
    b = await repository.find_or_create_url("https://b.example")
    c = await repository.find_or_create_url("https://c.example")
    await repository.add_check(a.id, AnalysisResult(status_code=500))
    await repository.add_check(a.id, AnalysisResult(status_code=200))
    await repository.add_check(c.id, AnalysisResult(status_code=404))

    rows = await repository.list_urls()
    assert [u.id for u, _ in rows] == [a.id, b.id, c.id]
    latest = {u.name: (chk.status_code if chk else None) for u, chk in rows}
    assert latest == {"https://a.example": 200, "https://b.example": None, "https://c.example": 404}


@pytest.mark.asyncio()
async def test_listing_empty(repository: CheckRepository):
    assert await repository.list_urls() == []


@pytest.mark.asyncio()
@pytest.mark.parametrize("url_id", [0, -1, 2**31, 2**70])
async def test_ids_outside_integer_range_are_not_found(repository: CheckRepository, url_id: int):
    assert await repository.find_url(url_id) is None
    assert await repository.list_checks(url_id) == []
    with pytest.raises(NotFoundError):
        await repository.get_url_with_checks(url_id)
    with pytest.raises(NotFoundError):
        await repository.add_check(url_id, AnalysisResult(status_code=200))


@pytest.mark.asyncio()
async def test_find_or_create_reports_single_winner(app_context: AppContext):
    results = await asyncio.gather(
        *(app_context.repository.find_or_create("https://winner.example") for _ in range(8))
    )
    assert [created for _url, created in results].count(True) == 1
    assert len({url.id for url, _created in results}) == 1
    assert await count_rows(app_context, Url) == 1
