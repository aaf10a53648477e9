"""
API Endpoint Tests
"""
import json
import pytest
from fastapi.testclient import TestClient

from report_summarizer.api.main import create_app
from tests.conftest import SAMPLE_SUMMARY, CompletionStub, build_pdf, build_png


@pytest.fixture
def stub():
    return CompletionStub(content=json.dumps(SAMPLE_SUMMARY, ensure_ascii=False))


@pytest.fixture
def client(settings, text_extractor, stub, upload_dir):
    app = create_app(settings, http_client=stub.client(), text_extractor=text_extractor)
    with TestClient(app) as test_client:
        yield test_client


class TestHealthEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    def test_health(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestSummarizeEndpoint:

    def test_pdf_returns_structured_summary(self, client, stub, upload_dir):
        pdf = build_pdf("Patient: Jane Doe. Diagnosis: mild flu.")
        response = client.post("/api/summarize", files={"file": ("report.pdf", pdf, "application/pdf")})

        assert response.status_code == 200
        assert response.json() == {"result": SAMPLE_SUMMARY}
        assert stub.call_count == 1
        assert list(upload_dir.iterdir()) == []

    def test_image_with_fallback_summary(self, client, stub, upload_dir):
        stub.content = "I cannot process this."
        response = client.post("/api/summarize", files={"file": ("scan.jpg", build_png(), "image/jpeg")})

        assert response.status_code == 200
        assert response.json() == {"result": {"summary": "I cannot process this."}}
        assert list(upload_dir.iterdir()) == []

    def test_missing_file(self, client, stub):
        response = client.post("/api/summarize")

        assert response.status_code == 400
        assert response.json() == {"error": "Please select a file"}
        assert stub.call_count == 0

    def test_unsupported_type(self, client, stub, upload_dir):
        response = client.post("/api/summarize", files={"file": ("notes.txt", b"hello", "text/plain")})

        assert response.status_code == 415
        assert "error" in response.json()
        assert stub.call_count == 0
        assert list(upload_dir.iterdir()) == []

    def test_unreadable_document(self, client, stub, fake_reader, upload_dir):
        fake_reader.detections = []
        response = client.post("/api/summarize", files={"file": ("blank.png", build_png(), "image/png")})

        assert response.status_code == 400
        assert response.json() == {"error": "No readable text was found in the document"}
        assert stub.call_count == 0
        assert list(upload_dir.iterdir()) == []

    def test_upstream_failure(self, client, stub, upload_dir):
        stub.status_code = 500
        stub.body = "internal error"
        response = client.post("/api/summarize", files={"file": ("report.pdf", build_pdf("Flu"), "application/pdf")})

        assert response.status_code == 502
        assert "internal error" in response.json()["error"]
        assert stub.call_count == 1
        assert list(upload_dir.iterdir()) == []


class TestUploadLimit:

    @pytest.fixture
    def small_client(self, settings, text_extractor, stub, upload_dir):
        settings.max_upload_bytes = 1024
        app = create_app(settings, http_client=stub.client(), text_extractor=text_extractor)
        with TestClient(app) as test_client:
            yield test_client

    def test_rejected_from_content_length(self, small_client, stub, upload_dir):
        payload = b"x" * (64 * 1024)
        response = small_client.post("/api/summarize", files={"file": ("big.png", payload, "image/png")})

        assert response.status_code == 413
        assert "error" in response.json()
        assert stub.call_count == 0
        assert list(upload_dir.iterdir()) == []

    def test_rejected_after_reading(self, small_client, stub, upload_dir):
        payload = b"x" * 2048
        response = small_client.post("/api/summarize", files={"file": ("big.png", payload, "image/png")})

        assert response.status_code == 413
        assert response.json() == {"error": "File exceeds the 1024 byte limit"}
        assert stub.call_count == 0
        assert list(upload_dir.iterdir()) == []

    def test_within_limit_is_processed(self, small_client, stub):
        response = small_client.post("/api/summarize", files={"file": ("scan.png", build_png(), "image/png")})
        assert response.status_code == 200


class TestServerErrors:

    @pytest.fixture
    def lenient_client(self, settings, text_extractor, stub, upload_dir):
        app = create_app(settings, http_client=stub.client(), text_extractor=text_extractor)
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

    def test_non_standard_json_completion_falls_back(self, client, stub, upload_dir):
        stub.content = '{"Patient_Name": NaN}'
        response = client.post("/api/summarize", files={"file": ("report.pdf", build_pdf("Flu"), "application/pdf")})

        assert response.status_code == 200
        assert response.json() == {"result": {"summary": '{"Patient_Name": NaN}'}}
        assert list(upload_dir.iterdir()) == []

    def test_unexpected_route_error_is_json_500(self, lenient_client, stub, monkeypatch):
        from report_summarizer.services.documents import UploadedDocument

        def disk_error(*args, **kwargs):
            raise OSError("disk unavailable")

        monkeypatch.setattr(UploadedDocument, "from_bytes", disk_error)
        response = lenient_client.post("/api/summarize", files={"file": ("scan.png", build_png(), "image/png")})

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"error": "Internal server error"}
        assert stub.call_count == 0
