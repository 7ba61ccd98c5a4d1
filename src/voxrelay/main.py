"""Main entry point for the voxrelay gateway."""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from voxrelay.api.routes import assistant, audio, documents, health
from voxrelay.api.schemas import ErrorResponse
from voxrelay.config import Settings, settings
from voxrelay.errors import (
    CompletionError,
    ConfigurationError,
    PDFExtractionError,
    TranscriptionError,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _handle_http_error(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


async def _handle_transcription_error(
    request: Request, exc: TranscriptionError
) -> JSONResponse:
    logger.error("Audio error on %s: %s", request.url.path, exc)
    return _error_response(exc.http_status, exc.message, exc.details())


async def _handle_completion_error(request: Request, exc: CompletionError) -> JSONResponse:
    logger.error("AI route error: %s", exc)
    return _error_response(502, "Failed to process AI request", {"failures": exc.failures})


async def _handle_configuration_error(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _error_response(503, str(exc))


async def _handle_pdf_error(request: Request, exc: PDFExtractionError) -> JSONResponse:
    logger.error("PDF error: %s", exc)
    return _error_response(422, str(exc))


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    from voxrelay import __version__

    app_settings = app_settings or settings

    app = FastAPI(
        title="voxrelay",
        description="AI gateway for PDF question answering and audio transcription",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HTTPException, _handle_http_error)
    app.add_exception_handler(TranscriptionError, _handle_transcription_error)
    app.add_exception_handler(CompletionError, _handle_completion_error)
    app.add_exception_handler(ConfigurationError, _handle_configuration_error)
    app.add_exception_handler(PDFExtractionError, _handle_pdf_error)

    # Include API routes
    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(assistant.router)
    app.include_router(audio.router)

    return app


app = create_app()


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "voxrelay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
