from pydantic import BaseModel
from typing import Dict, Any


class SummaryResponse(BaseModel):
    # Structured summary (eight keys) or fallback {"summary": raw_text}
    result: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
