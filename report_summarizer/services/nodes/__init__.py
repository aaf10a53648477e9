from .extract_text_node import extract_text
from .validate_text_node import validate_text, ensure_text_present
from .ai_summary_node import build_prompt, request_completion, parse_result, respond

__all__ = ["extract_text", "validate_text", "ensure_text_present", "build_prompt", "request_completion", "parse_result", "respond"]
