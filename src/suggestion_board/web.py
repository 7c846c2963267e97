"""HTTP wiring for the suggestion board service."""

from __future__ import annotations

import hmac
import json
import logging
from typing import Any, Awaitable, Callable, Dict

from aiohttp import web
from dotenv import load_dotenv

from .config import BoardConfig, ServerConfig
from .models import utcnow
from .services import BoardError, SuggestionBoardService
from .storage import InMemoryStorage

LOGGER = logging.getLogger(__name__)


load_dotenv()

SERVICES_KEY = web.AppKey("services", dict)

LEGACY_BOARD = "ideas"
_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,X-Admin-Token",
}

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def client_identity(request: web.Request) -> str:
    """Return the first forwarded address, falling back to the peer address."""

    raw = request.headers.get("X-Forwarded-For") or request.remote or ""
    return raw.split(",")[0].strip()


async def _read_body(request: web.Request) -> Dict[str, Any]:
    if not request.can_read_body:
        return {}
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        LOGGER.debug("Ignoring malformed JSON body on %s", request.path)
        return {}
    return payload if isinstance(payload, dict) else {}


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def cors_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=204, headers=_CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(_CORS_HEADERS)
        raise
    response.headers.update(_CORS_HEADERS)
    return response


@web.middleware
async def board_error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except BoardError as exc:
        return _error(exc.message, exc.status)


class BoardHandlers:
    """Request handlers bound to one board's service."""

    def __init__(self, service: SuggestionBoardService, admin_token: str | None) -> None:
        self.service = service
        self.admin_token = admin_token

    async def list_items(self, request: web.Request) -> web.Response:
        return web.json_response([view.as_dict() for view in self.service.list_items()])

    async def submit(self, request: web.Request) -> web.Response:
        body = await _read_body(request)
        self.service.submit(client_identity(request), body.get("text"))
        return web.json_response({"success": True})

    async def vote(self, request: web.Request) -> web.Response:
        body = await _read_body(request)
        stats = self.service.vote(client_identity(request), body.get("idx"), body.get("type"))
        return web.json_response({"success": True, **stats.as_dict()})

    async def reset_personal(self, request: web.Request) -> web.Response:
        self.service.reset_personal(client_identity(request))
        return web.json_response({"success": True})

    async def reset_all(self, request: web.Request) -> web.Response:
        if not self.admin_token:
            return _error("Admin reset is disabled", 403)
        supplied = request.headers.get("X-Admin-Token", "")
        if not hmac.compare_digest(supplied.encode(), self.admin_token.encode()):
            LOGGER.warning("Rejected admin reset from %s", client_identity(request))
            return _error("Forbidden", 403)
        self.service.reset_all()
        return web.json_response({"success": True})

    def routes(self, prefix: str) -> list[web.RouteDef]:
        return [
            web.get(prefix, self.list_items),
            web.post(prefix, self.submit),
            web.post(f"{prefix}/vote", self.vote),
            web.post(f"{prefix}/resetPersonal", self.reset_personal),
            web.post(f"{prefix}/reset", self.reset_all),
        ]


def build_service(
    board: BoardConfig, config: ServerConfig, clock=utcnow
) -> SuggestionBoardService:
    return SuggestionBoardService(
        board=board,
        storage=InMemoryStorage(board.seed),
        filter_config=config.filter_config,
        moderation=config.moderation,
        clock=clock,
    )


def create_app(config: ServerConfig | None = None, *, clock=utcnow) -> web.Application:
    config = config or ServerConfig()
    app = web.Application(middlewares=[cors_middleware, board_error_middleware])
    services: dict[str, SuggestionBoardService] = {}
    for board in config.boards:
        service = build_service(board, config, clock)
        services[board.name] = service
        handlers = BoardHandlers(service, config.admin_token)
        app.add_routes(handlers.routes(f"/api/{board.name}"))
        if board.name == LEGACY_BOARD:
            app.add_routes(
                [
                    web.post("/api/vote", handlers.vote),
                    web.post("/api/resetPersonal", handlers.reset_personal),
                    web.post("/api/reset", handlers.reset_all),
                ]
            )
    app[SERVICES_KEY] = services
    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    config = ServerConfig.from_env()
    app = create_app(config)
    if not config.admin_token:
        LOGGER.warning("BOARD_ADMIN_TOKEN is not configured; admin reset is disabled")
    LOGGER.info(
        "Suggestion board listening on %s:%s (boards: %s, ban window: %s)",
        config.host,
        config.port,
        ", ".join(board.name for board in config.boards),
        config.moderation.ban_duration,
    )
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
