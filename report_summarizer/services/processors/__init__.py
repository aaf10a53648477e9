from .text_extractor import TextExtractor
from .prompt_builder import build_summary_prompt, SUMMARY_FIELDS, NOT_FOUND
from .summarizer_client import SummarizerClient
from .result_parser import parse_summary, StructuredSummary, FallbackSummary, SummaryResult

__all__ = [
    "TextExtractor",
    "build_summary_prompt",
    "SUMMARY_FIELDS",
    "NOT_FOUND",
    "SummarizerClient",
    "parse_summary",
    "StructuredSummary",
    "FallbackSummary",
    "SummaryResult",
]
