# File: sitesweep/server.py
"""sitesweep.server: HTTP-интерфейс сканера на aiohttp.

Routes::

    GET  /health   -> {"status": "ok", "service": "sitesweep-scanner"}
    POST /scan     {"url": ...} -> ScanResult
    POST /crawl    {"url": ...} -> CrawlReport
    POST /harvest  {"url": ...} -> PageContent
"""
from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Optional

from aiohttp import web

from sitesweep.config import SiteSweepConfig
from sitesweep.engine import Engine
from sitesweep.errors import (
    CrawlTimeout,
    InvalidInput,
    InvalidURL,
    SiteSweepError,
    TargetUnreachable,
)
from sitesweep.logger import get_logger

__all__ = ["ENGINE_KEY", "create_app", "run_server"]

SERVICE_NAME = "sitesweep-scanner"
ENGINE_KEY = web.AppKey("engine", Engine)
CONFIG_KEY = web.AppKey("config", SiteSweepConfig)

logger = get_logger("server")

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _status_for(exc: SiteSweepError) -> int:
    if isinstance(exc, (InvalidInput, InvalidURL)):
        return 400
    if isinstance(exc, TargetUnreachable):
        return 502
    if isinstance(exc, CrawlTimeout):
        return 504
    return 500


@web.middleware
async def error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except SiteSweepError as exc:
        status = _status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, exc)
        return _error(status, str(exc))
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(500, str(exc) or "Scan failed")


def cors_middleware(origin: str) -> Any:
    headers = {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }

    @web.middleware
    async def _cors(request: web.Request, handler: _Handler) -> web.StreamResponse:
        if request.method == "OPTIONS":
            return web.Response(status=204, headers=headers)
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            exc.headers.update(headers)
            raise
        response.headers.update(headers)
        return response

    return _cors


async def _requested_url(request: web.Request) -> Optional[str]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(body, dict):
        return None
    url = body.get("url")
    return url if isinstance(url, str) else None


async def health(_request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": SERVICE_NAME})


async def scan(request: web.Request) -> web.Response:
    result = await request.app[ENGINE_KEY].scan(await _requested_url(request))
    return web.json_response(result.to_dict())


async def crawl(request: web.Request) -> web.Response:
    report = await request.app[ENGINE_KEY].crawl(await _requested_url(request))
    return web.json_response(report.to_dict())


async def harvest(request: web.Request) -> web.Response:
    page = await request.app[ENGINE_KEY].harvest(await _requested_url(request))
    return web.json_response(page.to_dict())


def create_app(config: Optional[SiteSweepConfig] = None, engine: Optional[Engine] = None) -> web.Application:
    config = config or SiteSweepConfig()
    app = web.Application(middlewares=[cors_middleware(config.server.cors_origin), error_middleware])
    app[CONFIG_KEY] = config
    app[ENGINE_KEY] = engine or Engine(config)
    app.router.add_get("/health", health)
    app.router.add_post("/scan", scan)
    app.router.add_post("/crawl", crawl)
    app.router.add_post("/harvest", harvest)
    return app


def run_server(config: SiteSweepConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Блокирующий запуск; aiohttp сам обрабатывает SIGINT/SIGTERM."""
    app = create_app(config)
    bind_host = host or config.server.host
    bind_port = port if port is not None else config.server.port

    async def _announce(_app: web.Application) -> None:
        logger.info("Server listening on %s:%s", bind_host, bind_port)

    async def _goodbye(_app: web.Application) -> None:
        logger.info("Shutting down.")

    app.on_startup.append(_announce)
    app.on_shutdown.append(_goodbye)
    web.run_app(app, host=bind_host, port=bind_port, print=None)
