"""Errors raised by the summarization pipeline.

Every error carries the HTTP status it maps to, so the orchestrator and the
API layer can turn it into a ``{"error": ...}`` response without a lookup table.
"""
from typing import Optional


class SummaryPipelineError(Exception):
    status_code = 500
    default_message = "Summarization failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingFileError(SummaryPipelineError):
    status_code = 400
    default_message = "Please select a file"


class PayloadTooLargeError(SummaryPipelineError):
    status_code = 413
    default_message = "Uploaded file is too large"


class UnsupportedFileTypeError(SummaryPipelineError):
    status_code = 415
    default_message = "Only PDF and image files are supported"

    def __init__(self, content_type: Optional[str] = None):
        self.content_type = content_type
        message = self.default_message
        if content_type:
            message = f"{message} (received: {content_type})"
        super().__init__(message)


class DocumentReadError(SummaryPipelineError):
    status_code = 400
    default_message = "The uploaded document could not be read"


class EmptyExtractionError(SummaryPipelineError):
    status_code = 400
    default_message = "No readable text was found in the document"


class UpstreamError(SummaryPipelineError):
    """The completion service answered with a non-success status or was unreachable."""

    status_code = 502
    default_message = "Completion service request failed"

    def __init__(self, body: str = "", upstream_status: Optional[int] = None):
        self.body = body
        self.upstream_status = upstream_status
        message = self.default_message
        if upstream_status is not None:
            message = f"{message} ({upstream_status})"
        if body:
            message = f"{message}: {body[:500]}"
        super().__init__(message)
