# File: page_analyzer/web.py
"""page_analyzer.web: JSON HTTP-интерфейс поверх PageAnalyzer.

Routes are declared in one explicit table (:data:`ROUTES`); the analyzer is
injected into the application, handlers never look it up globally.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Tuple

from aiohttp import web

from page_analyzer import __version__
from page_analyzer.config import AnalyzerConfig
from page_analyzer.engine import AppContext, PageAnalyzer
from page_analyzer.errors import NotFoundError, UrlValidationError
from page_analyzer.logger import get_logger
from page_analyzer.report.json_report import check_to_dict, detail_to_dict, listing_to_dicts, url_to_dict

__all__ = ["ANALYZER_KEY", "ROUTES", "create_app", "app_factory"]

log = get_logger("web")

ANALYZER_KEY = web.AppKey("analyzer", PageAnalyzer)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error(status: int, code: str, message: str) -> web.Response:
    return web.json_response({"error": code, "message": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except UrlValidationError as exc:
        return _error(422, exc.kind.value, str(exc))
    except NotFoundError as exc:
        return _error(404, "not_found", str(exc))
    except web.HTTPNotFound:
        return _error(404, "not_found", f"No route for {request.path}")
    except web.HTTPException:
        raise
    except Exception:
        log.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(500, "internal_error", "Internal server error")


def _analyzer(request: web.Request) -> PageAnalyzer:
    return request.app[ANALYZER_KEY]


def _url_id(request: web.Request) -> int:
    return int(request.match_info["id"])


async def _submitted_url(request: web.Request) -> Optional[str]:
    if request.content_type == "application/json":
        try:
            payload: Any = await request.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError alike
            raise web.HTTPBadRequest(
                text=json.dumps({"error": "bad_request", "message": f"Invalid JSON: {exc}"}),
                content_type="application/json",
            ) from exc
        value = payload.get("url") if isinstance(payload, dict) else None
    else:
        form = await request.post()
        value = form.get("url")
    return value if isinstance(value, str) else None


# --------------------------------------------------------------------------- #
# Handlers                                                                    #
# --------------------------------------------------------------------------- #


async def index(request: web.Request) -> web.Response:
    routes = [
        {"method": method, "path": path, "name": name}
        for method, path, _handler, name in ROUTES
    ]
    return web.json_response({"name": "page-analyzer", "version": __version__, "routes": routes})


async def list_urls(request: web.Request) -> web.Response:
    rows = await _analyzer(request).list_urls()
    return web.json_response(listing_to_dicts(rows))


async def create_url(request: web.Request) -> web.Response:
    raw = await _submitted_url(request)
    url, created = await _analyzer(request).add_url(raw)
    body: Dict[str, Any] = url_to_dict(url)
    body["created"] = created
    body["message"] = "Page added successfully" if created else "Page already exists"
    return web.json_response(body, status=201 if created else 200)


async def show_url(request: web.Request) -> web.Response:
    url, checks = await _analyzer(request).get_url(_url_id(request))
    return web.json_response(detail_to_dict(url, checks))


async def create_check(request: web.Request) -> web.Response:
    check = await _analyzer(request).run_check(_url_id(request))
    return web.json_response(check_to_dict(check), status=201)


#: (method, path, handler, route name)
ROUTES: Sequence[Tuple[str, str, Handler, str]] = (
    ("GET", "/", index, "root"),
    ("GET", "/urls", list_urls, "urls"),
    ("POST", "/urls", create_url, "urls_create"),
    ("GET", r"/urls/{id:\d+}", show_url, "url"),
    ("POST", r"/urls/{id:\d+}/checks", create_check, "url_checks"),
)


def create_app(analyzer: PageAnalyzer) -> web.Application:
    """Собирает aiohttp-приложение из таблицы маршрутов."""
    app = web.Application(middlewares=[error_middleware])
    app[ANALYZER_KEY] = analyzer
    for method, path, handler, name in ROUTES:
        app.router.add_route(method, path, handler, name=name)
    return app


async def app_factory(config: AnalyzerConfig, *, init_db: bool = False) -> web.Application:
    """Создаёт контекст внутри цикла событий сервера и закрывает его при остановке."""
    ctx = await AppContext.create(config)
    if init_db:
        await ctx.init_schema()
    app = create_app(ctx.analyzer)

    async def _close_context(_app: web.Application) -> None:
        await ctx.close()

    app.on_cleanup.append(_close_context)
    log.info("Web application ready (db=%s)", config.database_url.split("://", 1)[0])
    return app
