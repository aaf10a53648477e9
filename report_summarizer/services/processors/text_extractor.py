import asyncio
import io
import logging
import threading
from typing import Optional

import numpy as np  # EasyOCR consumes numpy arrays
from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from report_summarizer.config import Settings
from report_summarizer.services.documents import DocumentKind, UploadedDocument
from report_summarizer.services.errors import DocumentReadError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

# EasyOCR language codes; English script only, no language detection
OCR_LANGUAGES = ["en"]


class TextExtractor:
    """Turns an uploaded PDF or image into plain text."""

    def __init__(self, settings: Settings, reader=None):
        self.settings = settings
        self._reader = reader  # Cached EasyOCR reader, built on first image
        self._reader_lock = threading.Lock()

    async def extract(self, document: UploadedDocument) -> str:
        """
        Extract text from the document, choosing the strategy from its kind.

        Parsing and OCR block, so they run in a worker thread and other
        requests keep being served meanwhile.

        Raises:
            UnsupportedFileTypeError: declared type is neither PDF nor image (file is never read)
            DocumentReadError: the file could not be parsed as the declared type
        """
        kind = document.kind
        if kind is DocumentKind.UNSUPPORTED:
            raise UnsupportedFileTypeError(document.content_type)

        data = await asyncio.to_thread(document.read_bytes)

        if kind is DocumentKind.PDF:
            return await asyncio.to_thread(self.extract_pdf_text, data)
        elif kind is DocumentKind.IMAGE:
            return await asyncio.to_thread(self.extract_image_text, data)
        else:
            raise UnsupportedFileTypeError(document.content_type)

    def extract_pdf_text(self, pdf_bytes: bytes) -> str:
        """Concatenate the text of every page in document order."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = [page.extract_text() or "" for page in reader.pages]
        except (PyPdfError, ValueError, KeyError, TypeError) as e:
            # Malformed content streams surface as plain ValueError/KeyError/TypeError
            logger.warning(f"PDF parsing failed: {e}")
            raise DocumentReadError(f"Invalid PDF file: {e}")

        logger.debug(f"Extracted text from {len(pages)} PDF pages")
        return "\n".join(pages)

    def extract_image_text(self, image_bytes: bytes) -> str:
        """Run English OCR over the image and join detected lines in reading order."""
        image = self._load_image(image_bytes)
        reader = self._get_reader()
        result = reader.readtext(np.array(image))

        texts = []
        for detection in result:
            text = detection[1]  # Text is at index 1
            confidence = detection[2]  # Confidence is at index 2
            if text and isinstance(text, str):
                text = text.strip()
                if text and confidence >= self.settings.ocr_min_confidence:
                    texts.append(text)

        logger.debug(f"OCR kept {len(texts)} of {len(result)} detected text blocks")
        return "\n".join(texts)

    def _get_reader(self):
        """Initialize the EasyOCR reader once per process"""
        if self._reader is None:
            with self._reader_lock:
                if self._reader is None:
                    import easyocr  # Heavy import (torch); only needed for images

                    logger.info("Initializing EasyOCR with English language")
                    self._reader = easyocr.Reader(OCR_LANGUAGES, gpu=self.settings.ocr_gpu)
                    logger.info("EasyOCR initialized successfully")
        return self._reader

    def _load_image(self, image_bytes: bytes, max_dimension: Optional[int] = None) -> Image.Image:
        """Decode the image and downscale very large ones to cap OCR memory."""
        if max_dimension is None:
            max_dimension = self.settings.ocr_max_image_dimension

        try:
            img = Image.open(io.BytesIO(image_bytes)).convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise DocumentReadError(f"Invalid image file: {e}")

        width, height = img.size
        if max(width, height) > max_dimension:
            scale = max_dimension / max(width, height)
            new_size = (int(width * scale), int(height * scale))
            img = img.resize(new_size, Image.Resampling.LANCZOS)
            logger.info(f"Downscaled image from {width}x{height} to {new_size}")
        return img
