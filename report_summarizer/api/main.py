import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from report_summarizer import __version__
from report_summarizer.api.routes import router
from report_summarizer.config import Settings, get_settings, setup_logging
from report_summarizer.services.errors import SummaryPipelineError, PayloadTooLargeError
from report_summarizer.services.processors import TextExtractor, SummarizerClient
from report_summarizer.services.workflow import SummaryPipeline

logger = logging.getLogger(__name__)

# Allowance for multipart boundaries and part headers on top of the file itself
MULTIPART_OVERHEAD_BYTES = 16 * 1024


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    text_extractor: Optional[TextExtractor] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        summarizer_client = SummarizerClient(settings, http_client=http_client)
        app.state.pipeline = SummaryPipeline(
            text_extractor=text_extractor or TextExtractor(settings),
            summarizer_client=summarizer_client,
        )
        logger.info(f"Summarizer ready (model: {settings.completion_model}, upload limit: {settings.max_upload_bytes} bytes)")
        try:
            yield
        finally:
            await summarizer_client.aclose()

    # Initialize FastAPI app
    app = FastAPI(
        title="Medical Report Summarizer API",
        version=__version__,
        description="Summarizes medical reports (PDF or image) into structured JSON using OCR and an LLM",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def enforce_upload_limit(request: Request, call_next):
        # Reject oversized bodies from the header, before the multipart body is parsed
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            if int(content_length) > settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES:
                error = PayloadTooLargeError(f"File exceeds the {settings.max_upload_bytes} byte limit")
                return JSONResponse(status_code=error.status_code, content={"error": error.message})
        return await call_next(request)

    @app.exception_handler(SummaryPipelineError)
    async def pipeline_error_handler(request: Request, exc: SummaryPipelineError):
        logger.warning(f"Request rejected: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request: please upload a single file in the 'file' field"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # Include router
    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "message": "Medical Report Summarizer API",
            "version": __version__,
            "status": "running"
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "report_summarizer.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_config=None  # Use our custom logging
    )
