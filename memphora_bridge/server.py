"""Async HTTP server exposing the actions.

Uses aiohttp's AppRunner/TCPSite for non-blocking start/stop. Every action
call is handled synchronously: the response carries the action output or
the error that stopped it.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from aiohttp import web

from memphora_bridge.actions import InvocationContext, registry
from memphora_bridge.actions.connection import check_connection, connection_label
from memphora_bridge.actions.registry import UnknownActionError
from memphora_bridge.config import settings
from memphora_bridge.errors import AuthenticationError, InputError

logger = logging.getLogger(__name__)


def _error(message: str, kind: str, status: int) -> web.Response:
    return web.json_response({"error": message, "type": kind}, status=status)


def _authorized(request: web.Request) -> bool:
    """Check the shared secret when ACTION_SECRET is set."""
    if not settings.action_secret:
        return True
    return request.headers.get("X-Action-Secret", "") == settings.action_secret


def _invocation(request: web.Request) -> InvocationContext:
    """Build the invocation context from request headers."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    api_key = token.strip() if scheme.lower() == "bearer" else ""
    return InvocationContext(
        zap_id=request.headers.get("X-Zap-Id", ""),
        api_key=api_key,
        default_user_id=request.headers.get("X-Default-User-Id", ""),
    )


async def _health(request: web.Request) -> web.Response:
    """GET /health: basic liveness check."""
    return web.json_response({"status": "ok"})


async def _describe(request: web.Request) -> web.Response:
    """GET /app: registered actions with their input schemas."""
    return web.json_response(registry.describe())


async def _auth_test(request: web.Request) -> web.Response:
    """GET /auth/test: verify the caller's Memphora API key."""
    if not _authorized(request):
        logger.warning("Auth test rejected: invalid secret")
        return _error("unauthorized", "AuthenticationError", 401)

    invocation = _invocation(request)
    try:
        result = await check_connection(invocation)
    except AuthenticationError as exc:
        return _error(str(exc), "AuthenticationError", 401)
    except httpx.HTTPError as exc:
        logger.warning("Auth test upstream failure: %s", exc)
        return _error(f"Memphora request failed: {exc}", "UpstreamError", 502)

    return web.json_response({**result, "label": connection_label(invocation)})


async def _run_action(request: web.Request) -> web.Response:
    """POST /actions/<key>: run an action with the JSON body as input."""
    key = request.match_info["key"]

    if not _authorized(request):
        logger.warning("Action rejected: invalid secret (key=%s)", key)
        return _error("unauthorized", "AuthenticationError", 401)

    try:
        payload: Any = await request.json()
    except Exception:
        logger.warning("Action bad request: invalid JSON (key=%s)", key)
        return _error("invalid JSON", "InputError", 400)

    if not isinstance(payload, dict):
        return _error("request body must be a JSON object", "InputError", 400)

    try:
        result = await registry.execute(key, payload, _invocation(request))
    except UnknownActionError as exc:
        return _error(str(exc), "NotFound", 404)
    except InputError as exc:
        return _error(str(exc), "InputError", 400)
    except AuthenticationError as exc:
        return _error(str(exc), "AuthenticationError", 401)
    except httpx.HTTPError as exc:
        return _error(f"Memphora request failed: {exc}", "UpstreamError", 502)

    return web.json_response(result)


def _create_web_app() -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application()
    app.router.add_get("/health", _health)
    app.router.add_get("/app", _describe)
    app.router.add_get("/auth/test", _auth_test)
    app.router.add_post("/actions/{key}", _run_action)
    return app


class ActionServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(self, host: str | None = None, port: int | None = None) -> None:
        self.host = host or settings.server_host
        self.port = port or settings.server_port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for action calls."""
        if not settings.action_secret:
            logger.warning("ACTION_SECRET empty, /actions is open to any caller")

        app = _create_web_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(
            "Action server listening on %s:%d (actions: %s)",
            self.host,
            self.port,
            registry.action_keys,
        )

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Action server stopped")
