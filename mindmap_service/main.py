"""
Mind Map Service
================
FastAPI entry point.
  • Global exception handlers: every failure returns a JSON envelope
  • Single /api/process endpoint: text or URL → positioned mind map graph
  • LLM gateway injected at construction, or built lazily from settings
  • Async timeout protection around the whole pipeline
"""

import asyncio
import logging
from typing import Optional

import uvicorn
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from mindmap_service.core.config import Settings, settings as default_settings
from mindmap_service.core.exceptions import MindMapError, ProviderError, ValidationError
from mindmap_service.schemas.mindmap import MindMapGraph
from mindmap_service.schemas.process import ErrorResponse, ProcessRequest
from mindmap_service.services.llm_gateway import LLMGateway, build_gateway
from mindmap_service.services.page_extractor import PageExtractor
from mindmap_service.services.pipeline import MindMapPipeline
from mindmap_service.services.topic_extractor import TopicExtractor

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Mind map backend is running"


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _unexpected_error_response(path: str, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception on {path}: {exc}", exc_info=exc)
    body = ErrorResponse(error="Failed to process content", details=str(exc), type=type(exc).__name__)
    return _error_response(500, body)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[LLMGateway] = None,
    page_extractor: Optional[PageExtractor] = None,
) -> FastAPI:
    """
    Build the application.

    `gateway` and `page_extractor` are the external collaborators; when no
    gateway is given one is built from settings on the first request, so a
    missing credential surfaces as a ConfigError response, not a crash.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Mind Map Service",
        description="Text or web page → summary + hierarchical, positioned mind map.",
        version="1.0.0",
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            504: {"model": ErrorResponse},
        },
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.page_extractor = page_extractor or PageExtractor(timeout=settings.PAGE_FETCH_TIMEOUT_SECONDS)

    # ── Exception Handlers ───────────────────────────────────────────────────
    @app.exception_handler(MindMapError)
    async def mindmap_error_handler(request: Request, exc: MindMapError):
        if exc.status_code >= 500:
            extra = f" [{exc.provider}: {exc.cause_type}]" if isinstance(exc, ProviderError) else ""
            logger.error(
                f"{type(exc).__name__} on {request.url.path}: {exc}{extra}",
                exc_info=exc,
            )
        if isinstance(exc, ValidationError):
            return _error_response(exc.status_code, ErrorResponse(error=exc.error))
        body = ErrorResponse(error=exc.error, details=str(exc), type=type(exc).__name__)
        return _error_response(exc.status_code, body)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        body = ErrorResponse(error="Invalid request", details=str(exc.errors()), type="ValidationError")
        return _error_response(400, body)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all: every unhandled exception returns a clean JSON envelope."""
        return _unexpected_error_response(request.url.path, exc)

    # ── CORS ─────────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_pipeline() -> MindMapPipeline:
        if app.state.gateway is None:
            # Raises ConfigError before any provider call is made
            app.state.gateway = build_gateway(settings)
        topic_extractor = TopicExtractor(
            app.state.gateway,
            chunk_size=settings.CHUNK_SIZE,
            max_concurrency=settings.MAX_CONCURRENT_LLM_CALLS,
        )
        return MindMapPipeline(app.state.gateway, app.state.page_extractor, topic_extractor)

    # ── Health Check ─────────────────────────────────────────────────────────
    @app.get("/", tags=["System"], response_class=PlainTextResponse)
    async def health_check():
        return HEALTH_MESSAGE

    # ── Main Endpoint ────────────────────────────────────────────────────────
    @app.post(
        "/api/process",
        response_model=MindMapGraph,
        tags=["Processing"],
        summary="Turn text or a web page into a positioned mind map",
    )
    async def process_content(request: Optional[ProcessRequest] = Body(default=None)):
        """
        1. Validates the request content
        2. Extracts page text when type is 'url'
        3. Summarises + extracts topics concurrently
        4. Returns the laid-out node/edge graph
        """
        if request is None or not request.content or not request.content.strip():
            raise ValidationError("Content is required")

        pipeline = get_pipeline()
        try:
            return await asyncio.wait_for(
                pipeline.process(request.content, request.type),
                timeout=settings.PIPELINE_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.error(f"[PROCESS] ✗ Timed out after {settings.PIPELINE_TIMEOUT_SECONDS}s")
            body = ErrorResponse(
                error="Processing timed out",
                details=f"Processing exceeded {settings.PIPELINE_TIMEOUT_SECONDS}s.",
                type="TimeoutError",
            )
            return _error_response(504, body)
        except MindMapError:
            raise
        except Exception as e:
            # Handled inside CORSMiddleware, unlike the catch-all handler
            return _unexpected_error_response("/api/process", e)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)
