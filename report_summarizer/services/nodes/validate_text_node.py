import logging
from report_summarizer.services.errors import EmptyExtractionError
from report_summarizer.services.states import SummaryState, PipelineStage

logger = logging.getLogger(__name__)

def ensure_text_present(text: str) -> None:
    if not text or not text.strip():
        raise EmptyExtractionError()

def validate_text(state: SummaryState) -> dict:
    """Step 2: Refuse to spend a completion call on unreadable documents"""
    logger.info("Step 2: Validating extracted text")
    text = state.get("extracted_text", "")
    try:
        ensure_text_present(text)
    except EmptyExtractionError:
        logger.warning("Extraction returned empty text - no readable content in document")
        raise
    return {"stage": PipelineStage.VALIDATING}
