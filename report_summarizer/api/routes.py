from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse
from typing import Optional
import asyncio
import logging
from report_summarizer.api.models import SummaryResponse, ErrorResponse
from report_summarizer.config import Settings
from report_summarizer.services.documents import UploadedDocument
from report_summarizer.services.errors import MissingFileError, PayloadTooLargeError
from report_summarizer.services.workflow import SummaryPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["summarize"])


def get_pipeline(request: Request) -> SummaryPipeline:
    return request.app.state.pipeline


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post(
    "/summarize",
    response_model=SummaryResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        415: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def summarize_document(
    file: Optional[UploadFile] = File(None, description="Medical report (PDF or image)"),
    pipeline: SummaryPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """
    Summarize one medical document: extract its text (PDF parsing or OCR) and
    return the structured summary produced by the completion service.
    """
    if file is None or not file.filename:
        raise MissingFileError()

    # Read at most one byte past the ceiling so oversized uploads are detected without buffering them whole
    file_bytes = await file.read(settings.max_upload_bytes + 1)
    if len(file_bytes) > settings.max_upload_bytes:
        raise PayloadTooLargeError(f"File exceeds the {settings.max_upload_bytes} byte limit")

    logger.info(f"Processing document: {file.filename} (type: {file.content_type}, {len(file_bytes)} bytes)")

    # Save uploaded file to temporary location; the pipeline owns it from here
    document = await asyncio.to_thread(
        UploadedDocument.from_bytes, file_bytes, file.content_type, file.filename
    )
    outcome = await pipeline.run(document)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)


@router.get("/health")
async def health():
    return {"status": "healthy"}
