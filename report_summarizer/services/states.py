from enum import Enum
from typing import TypedDict, Optional

from report_summarizer.services.documents import UploadedDocument
from report_summarizer.services.processors.result_parser import SummaryResult


class PipelineStage(str, Enum):
    RECEIVED = "received"
    EXTRACTING = "extracting"
    VALIDATING = "validating"
    PROMPTING = "prompting"
    AWAITING_COMPLETION = "awaiting_completion"
    PARSING = "parsing"
    RESPONDED = "responded"


class SummaryState(TypedDict):
    """State that flows through the LangGraph workflow for one request"""
    document: UploadedDocument  # Temporary upload, released after extraction
    stage: PipelineStage  # Last stage completed
    extracted_text: str
    prompt: Optional[str]  # Rendered fresh for every request
    raw_completion: Optional[str]  # Raw answer from the completion service
    result: Optional[SummaryResult]
