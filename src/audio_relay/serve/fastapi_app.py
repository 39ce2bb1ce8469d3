"""FastAPI front end for the audio job relay.

Endpoints:
- GET /
- GET /debug                    (only when RELAY_DEBUG is set)
- GET /api/parameters
- POST /api/generate-audio      MusicGen, synchronous wait upstream
- POST /api/riffusion-generate  Riffusion, submit then poll
"""
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from audio_relay import __version__
from audio_relay.common.config import RelayConfig, load_config
from audio_relay.common.errors import RelayError
from audio_relay.common.logging_setup import setup_logging
from audio_relay.common.schema import (
    ALLOWED_MODELS,
    DEFAULT_MODEL,
    MusicGenRequest,
    RiffusionRequest,
    default_parameters,
)
from audio_relay.relay.job_relay import MUSICGEN_VERSION, JobRelay
from audio_relay.relay.upstream import PredictionClient
from audio_relay.serve.cors import OriginGateMiddleware

LOGGER = logging.getLogger("audio_relay.serve.app")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RelayError)
    async def handle_relay_error(_request: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_error())

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if not errors:
            return JSONResponse(status_code=400, content={"error": "Invalid request"})
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first['msg']}" if field else first["msg"]
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled server error")
        return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(config: RelayConfig | None = None, relay: JobRelay | None = None) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        config: Startup configuration; read from the environment when omitted.
        relay: Job relay to use; built from config when omitted.
    """
    config = config or load_config()
    setup_logging(config.log_level)
    relay = relay or JobRelay(PredictionClient(config))
    if not config.has_api_token:
        LOGGER.warning("REPLICATE_API_KEY is not set; upstream calls will be rejected")

    app = FastAPI(title="audio-relay", version=__version__, docs_url="/docs", redoc_url=None)
    app.state.config = config
    app.state.relay = relay
    app.add_middleware(OriginGateMiddleware, config=config)
    _register_exception_handlers(app)

    @app.get("/")
    def status() -> dict[str, str]:
        return {
            "status": "OK",
            "message": "Audio relay backend is running",
            "version": __version__,
            "timestamp": _now(),
        }

    if config.debug_enabled:
        @app.get("/debug")
        def debug() -> dict[str, Any]:
            return {
                "hasReplicateKey": config.has_api_token,
                "keyLength": len(config.api_token),
                "environment": config.environment,
                "port": config.port,
                "timestamp": _now(),
            }

    @app.get("/api/parameters")
    def parameters() -> dict[str, Any]:
        return {
            "availableModels": list(ALLOWED_MODELS),
            "defaultModel": DEFAULT_MODEL,
            "parameters": default_parameters(MUSICGEN_VERSION),
        }

    @app.post("/api/generate-audio")
    def generate_audio(body: MusicGenRequest) -> dict[str, Any]:
        LOGGER.debug("generate-audio request: %s", body.model_dump())
        return relay.generate_music(body)

    @app.post("/api/riffusion-generate")
    def riffusion_generate(body: RiffusionRequest) -> dict[str, Any]:
        LOGGER.debug("riffusion-generate request: %s", body.model_dump())
        return relay.generate_riffusion(body)

    return app


app = create_app()
