import json
import math
import logging
from typing import Any, Dict, Union

from pydantic import BaseModel

from report_summarizer.services.processors.prompt_builder import SUMMARY_FIELDS

logger = logging.getLogger(__name__)


class StructuredSummary(BaseModel):
    """JSON object returned by the model, passed through as-is."""
    data: Dict[str, Any]

    def missing_fields(self) -> list[str]:
        return [field for field in SUMMARY_FIELDS if field not in self.data]

    def extra_fields(self) -> list[str]:
        return [key for key in self.data if key not in SUMMARY_FIELDS]

    def to_payload(self) -> Dict[str, Any]:
        return self.data


class FallbackSummary(BaseModel):
    """Raw model text, used when the answer is not a JSON object."""
    summary: str

    def to_payload(self) -> Dict[str, Any]:
        return {"summary": self.summary}


SummaryResult = Union[StructuredSummary, FallbackSummary]


def _reject_constant(name: str):
    # json.loads accepts NaN/Infinity, which cannot be rendered back as JSON
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {literal}")
    return value


def _strip_code_fence(text: str) -> str:
    # Clean JSON string (remove a surrounding markdown code block if present)
    if text.startswith("```json"):
        text = text.removeprefix("```json")
    elif text.startswith("```"):
        text = text.removeprefix("```")
    else:
        return text
    return text.strip().removesuffix("```").strip()


def parse_summary(raw_text: str) -> SummaryResult:
    """
    Interpret the completion text as a structured summary.

    Any JSON object is accepted, even with unexpected keys; mismatches are
    only logged. Text that does not parse to an object (including JSON using
    NaN or Infinity) is wrapped in a FallbackSummary. This function never raises.
    """
    json_str = _strip_code_fence((raw_text or "").strip())
    try:
        parsed = json.loads(json_str, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except ValueError as e:  # JSONDecodeError is a ValueError
        logger.warning(f"Completion is not valid JSON, returning raw text: {e}")
        return FallbackSummary(summary=raw_text or "")

    if not isinstance(parsed, dict):
        logger.warning(f"Completion JSON is a {type(parsed).__name__}, not an object; returning raw text")
        return FallbackSummary(summary=raw_text)

    summary = StructuredSummary(data=parsed)
    missing, extra = summary.missing_fields(), summary.extra_fields()
    if missing or extra:
        logger.warning(f"Summary keys differ from schema - missing: {missing}, extra: {extra}")
    return summary
