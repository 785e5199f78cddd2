# File: tests/conftest.py
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from page_analyzer.config import AnalyzerConfig
from page_analyzer.db.repository import CheckRepository
from page_analyzer.engine import AppContext

SEO_PAGE = """
<!DOCTYPE html>
<html>
<head>
    <title>Test Page Title</title>
    <meta name="description" content="Test page description">
</head>
<body>
    <h1>Test H1 Header</h1>
    <p>Some content</p>
</body>
</html>
"""


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "analyzer.db"


@pytest.fixture()
def basic_config(db_path: Path) -> AnalyzerConfig:
    """
    Return a valid AnalyzerConfig backed by a throwaway SQLite file.
    """
    return AnalyzerConfig(
        database_url=f"sqlite+aiosqlite:///{db_path}",
        request_timeout=2.0,
        user_agent="TestAgent/1.0",
    )


@pytest_asyncio.fixture
async def app_context(basic_config: AnalyzerConfig) -> AsyncIterator[AppContext]:
    """Fully wired context with the schema created."""
    ctx = await AppContext.create(basic_config)
    await ctx.init_schema()
    try:
        yield ctx
    finally:
        await ctx.close()


@pytest.fixture()
def repository(app_context: AppContext) -> CheckRepository:
    return app_context.repository


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def target_site(unused_tcp_port: int) -> AsyncIterator[str]:
    """A remote site with one page per scenario a check has to handle."""
    app = web.Application()

    async def seo(_):
        return web.Response(text=SEO_PAGE, content_type="text/html")

    async def bare(_):
        return web.Response(text="<html><body><p>nothing here</p></body></html>", content_type="text/html")

    async def missing(_):
        return web.Response(text="<title>Not Found</title>", status=404, content_type="text/html")

    async def broken(_):
        return web.Response(status=500)

    async def redirect(_):
        raise web.HTTPFound("/")

    app.router.add_get("/", seo)
    app.router.add_get("/bare", bare)
    app.router.add_get("/missing", missing)
    app.router.add_get("/broken", broken)
    app.router.add_get("/redirect", redirect)

    async for url in serve_app(app, unused_tcp_port):
        yield url
