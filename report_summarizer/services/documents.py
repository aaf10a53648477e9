import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class DocumentKind(str, Enum):
    """Extraction strategy selected from the declared content type."""
    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


PDF_CONTENT_TYPE = "application/pdf"

# Suffix used for the temporary file when the upload has no usable filename
CONTENT_TYPE_TO_EXTENSION = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/webp": ".webp",
    "image/tiff": ".tiff",
    "application/pdf": ".pdf"
}


def normalize_content_type(content_type: Optional[str]) -> str:
    """Lowercase the MIME type and drop parameters such as ``; charset=...``."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def classify_content_type(content_type: Optional[str]) -> DocumentKind:
    mime_type = normalize_content_type(content_type)
    if mime_type == PDF_CONTENT_TYPE:
        return DocumentKind.PDF
    if mime_type.startswith("image/") and len(mime_type) > len("image/"):
        return DocumentKind.IMAGE
    return DocumentKind.UNSUPPORTED


class UploadedDocument:
    """
    An uploaded file spooled to a temporary path for the lifetime of one request.

    The temporary file is deleted by ``release()``. Release is idempotent, so the
    extraction stage and the orchestrator may both call it and the file is still
    removed only once.
    """

    def __init__(self, path: str, content_type: Optional[str], file_name: Optional[str] = None, size: int = 0):
        self.path = path
        self.content_type = content_type
        self.kind = classify_content_type(content_type)
        self.file_name = file_name
        self.size = size
        self._released = False

    @classmethod
    def from_bytes(cls, data: bytes, content_type: Optional[str], file_name: Optional[str] = None) -> "UploadedDocument":
        # Determine file extension from filename, else from content type
        suffix = Path(file_name).suffix.lower() if file_name else ""
        if not suffix:
            suffix = CONTENT_TYPE_TO_EXTENSION.get(normalize_content_type(content_type), ".tmp")

        with tempfile.NamedTemporaryFile(delete=False, prefix="upload_", suffix=suffix) as tmp_file:
            tmp_file_path = tmp_file.name
            try:
                tmp_file.write(data)
            except BaseException:
                # Never leave a half-written upload behind
                tmp_file.close()
                os.unlink(tmp_file_path)
                raise

        logger.debug(f"Spooled upload {file_name!r} ({len(data)} bytes) to {tmp_file_path}")
        return cls(tmp_file_path, content_type, file_name=file_name, size=len(data))

    @property
    def released(self) -> bool:
        return self._released

    def read_bytes(self) -> bytes:
        if self._released:
            raise RuntimeError(f"Document {self.path} has already been released")
        return Path(self.path).read_bytes()

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            if os.path.exists(self.path):
                os.unlink(self.path)
        except OSError as e:
            logger.warning(f"Failed to delete temporary file {self.path}: {e}")

    def __enter__(self) -> "UploadedDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"UploadedDocument(file_name={self.file_name!r}, kind={self.kind.value}, size={self.size})"
