"""Origin allow-list enforced in front of every route."""
from __future__ import annotations
import logging

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from audio_relay.common.config import RelayConfig

LOGGER = logging.getLogger("audio_relay.serve.cors")


def is_origin_allowed(origin: str | None, config: RelayConfig) -> bool:
    """Requests without an Origin header are non-browser clients and pass."""
    if origin is None:
        return True
    if config.hosting_suffix and origin.endswith(config.hosting_suffix):
        return True
    return origin in config.allowed_origins


class OriginGateMiddleware(CORSMiddleware):
    """CORSMiddleware that answers 403 for origins outside the allow-list.

    Allowed origins get credentialed CORS headers from the parent class.
    """

    def __init__(self, app: ASGIApp, config: RelayConfig) -> None:
        super().__init__(
            app,
            allow_origins=list(config.allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        self.config = config

    def is_allowed_origin(self, origin: str) -> bool:
        return is_origin_allowed(origin, self.config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            origin = Headers(scope=scope).get("origin")
            if not is_origin_allowed(origin, self.config):
                LOGGER.warning("Rejected request from origin %s to %s", origin, scope.get("path"))
                response = JSONResponse({"error": "Not allowed by CORS"}, status_code=403)
                await response(scope, receive, send)
                return
        await super().__call__(scope, receive, send)
