"""
Test Configuration and Fixtures
"""
import io
import json
import pytest
import httpx
from PIL import Image

from report_summarizer.config import Settings
from report_summarizer.services.processors import SUMMARY_FIELDS, TextExtractor


SAMPLE_SUMMARY = {
    "Patient_Name": "Jane Doe",
    "Hospital_Or_Clinic": "City Care Clinic",
    "Doctor_Name": "Dr. A. Sharma",
    "English_Summary": "Jane Doe has a mild flu and should rest.",
    "Hindi_Summary": "जेन डो को हल्का फ्लू है और उन्हें आराम करना चाहिए।",
    "Diagnosis": "- Mild flu",
    "Prescription": "- Paracetamol 500mg, twice daily",
    "Follow_Up": "- Review after 5 days",
}
assert list(SAMPLE_SUMMARY) == list(SUMMARY_FIELDS)


def build_pdf(*page_texts: str) -> bytes:
    """Build a small text PDF (one Helvetica line per page) with a valid xref table."""
    page_ids = [4 + 2 * i for i in range(len(page_texts))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(page_texts)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for pid, text in zip(page_ids, page_texts):
        escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream = f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {pid + 1} 0 R >>".encode()
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n".encode()
    return bytes(out)


def build_png(size=(60, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, "white").save(buffer, format="PNG")
    return buffer.getvalue()


class FakeOCRReader:
    """Stands in for easyocr.Reader; returns canned detections."""

    def __init__(self, detections=None):
        self.detections = detections if detections is not None else []
        self.calls = []

    def readtext(self, image):
        self.calls.append(image)
        return self.detections


class CompletionStub:
    """Records outbound completion requests and answers with a canned response."""

    def __init__(self, status_code=200, content=None, body=None):
        self.status_code = status_code
        self.content = content
        self.body = body
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        payload = {"choices": [{"message": {"role": "assistant", "content": self.content}}]}
        return httpx.Response(self.status_code, json=payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def sent_json(self, index=0) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return Settings(perplexity_api_key="test-key", _env_file=None)


@pytest.fixture
def fake_reader():
    return FakeOCRReader([
        ([[0, 0], [10, 0], [10, 10], [0, 10]], "Patient: Jane Doe", 0.91),
        ([[0, 20], [10, 20], [10, 30], [0, 30]], "Diagnosis: mild flu", 0.87),
    ])


@pytest.fixture
def text_extractor(settings, fake_reader):
    return TextExtractor(settings, reader=fake_reader)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """Send temporary uploads to an isolated directory so leftovers can be counted."""
    import tempfile
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory
