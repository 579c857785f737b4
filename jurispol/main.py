from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response
from opentelemetry import trace

from .gemini_client import GeminiClient, MissingApiKeyError, is_quota_error
from .logging_config import configure_logging
from .observability import (
    REQUESTS_TOTAL,
    REQUEST_LATENCY,
    GENERATION_LATENCY,
    SOURCES_RETURNED,
    UPSTREAM_ERRORS,
    instrument_fastapi,
    setup_tracing,
    timer,
)
from .prompts import (
    INTERNAL_ERROR,
    INVALID_REQUEST_ERROR,
    MISSING_KEY_DETAILS,
    MISSING_MESSAGE_ERROR,
    QUOTA_DETAILS,
    QUOTA_ERROR,
)
from .schemas import ChatRequest, ChatResponse, ErrorResponse
from .settings import Settings, settings

logger = logging.getLogger(__name__)
TRACER = trace.get_tracer(__name__)

CHAT_ENDPOINT = "/api/chat"


def _build_generator(cfg: Settings) -> Optional[GeminiClient]:
    try:
        return GeminiClient(cfg.gemini_api_key, cfg.gemini_model)
    except MissingApiKeyError as e:
        # serve-and-degrade: static files and /health stay up
        logger.critical("%s /api/chat will answer 500 until it is set.", e)
        return None


def _error(status: int, error: str, details: Optional[str] = None) -> JSONResponse:
    REQUESTS_TOTAL.labels(endpoint=CHAT_ENDPOINT, status=str(status)).inc()
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status, content=body)


def _mount_frontend(app: FastAPI, frontend_dir: str) -> None:
    root = Path(frontend_dir).resolve()
    index_path = root / "index.html"
    if not index_path.is_file():
        logger.warning("Frontend bundle not found at %s, serving the API only", root)
        return

    @app.get("/", include_in_schema=False)
    def serve_frontend_root():
        return FileResponse(index_path)

    @app.get("/{path:path}", include_in_schema=False)
    def serve_frontend_assets(path: str):
        file_path = (root / path).resolve()
        if file_path.is_file() and root in file_path.parents:
            return FileResponse(file_path)
        return FileResponse(index_path)

    logger.info("Serving frontend bundle from %s", root)


def create_app(cfg: Settings = settings, generator: Optional[Any] = None) -> FastAPI:
    """Build the relay.

    `generator` is anything with a `generate(history, message)` method returning
    `(text, sources)`; by default a GeminiClient built from `cfg`.
    """
    app = FastAPI(title="JurisPol Relay", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if cfg.otel_enabled:
        instrument_fastapi(app)

    app.state.settings = cfg
    app.state.generator = generator if generator is not None else _build_generator(cfg)

    @app.exception_handler(RequestValidationError)
    def invalid_request(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
        )
        logger.warning("Rejected malformed request on %s: %s", request.url.path, details)
        return _error(400, INVALID_REQUEST_ERROR, details or None)

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "model": cfg.gemini_model,
            "api_key_configured": app.state.generator is not None,
        }

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post(
        CHAT_ENDPOINT,
        response_model=ChatResponse,
        responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    def chat(req: ChatRequest):
        logger.info("Received request on %s (%d history turns)", CHAT_ENDPOINT, len(req.history))
        if not req.message:
            return _error(400, MISSING_MESSAGE_ERROR)

        generator = app.state.generator
        if generator is None:
            return _error(500, INTERNAL_ERROR, MISSING_KEY_DETAILS)

        with REQUEST_LATENCY.labels(endpoint=CHAT_ENDPOINT).time():
            with TRACER.start_as_current_span("chat_request") as span:
                span.set_attribute("history_turns", len(req.history))
                try:
                    with timer(GENERATION_LATENCY):
                        text, sources = generator.generate(req.history, req.message)
                except Exception as e:
                    logger.error("Provider error: %s", e)
                    if is_quota_error(e):
                        UPSTREAM_ERRORS.labels(kind="quota").inc()
                        return _error(429, QUOTA_ERROR, QUOTA_DETAILS)
                    UPSTREAM_ERRORS.labels(kind="other").inc()
                    return _error(500, INTERNAL_ERROR, str(e))

                span.set_attribute("sources", len(sources))
                SOURCES_RETURNED.observe(len(sources))
                REQUESTS_TOTAL.labels(endpoint=CHAT_ENDPOINT, status="200").inc()
                logger.info("Answer generated with %d sources", len(sources))
                return ChatResponse(text=text, sources=sources)

    # registered last so the catch-all route never shadows the API
    _mount_frontend(app, cfg.frontend_dir)
    return app


configure_logging(settings.otel_service_name)
if settings.otel_enabled:
    setup_tracing(settings.otel_service_name, settings.otel_endpoint)

app = create_app(settings)


def run() -> None:
    import uvicorn

    logger.info("JurisPol relay listening on %s:%d", settings.host, settings.port)
    uvicorn.run("jurispol.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
