import base64
import json

import httpx
import pytest

from roofquote.config.settings import Settings
from roofquote.ocr.exceptions import OcrError, OcrNetworkError
from roofquote.ocr.factory import OcrEngineFactory
from roofquote.ocr.mistral_adapter import MistralOcrAdapter, build_ocr_payload
from roofquote.ocr.models import OcrResult, needs_ocr
from roofquote.ocr.pdfplumber_adapter import PdfPlumberAdapter
from roofquote.ocr.pymupdf_adapter import PyMuPdfAdapter


class TestNeedsOcr:
    @pytest.mark.parametrize("mime_type", ["application/pdf", "image/png", "image/jpeg"])
    def test_pdf_and_images(self, mime_type: str) -> None:
        assert needs_ocr(mime_type) is True

    @pytest.mark.parametrize("mime_type", ["text/plain", "text/csv", "application/json"])
    def test_everything_else(self, mime_type: str) -> None:
        assert needs_ocr(mime_type) is False


@pytest.mark.parametrize("adapter_cls", [PdfPlumberAdapter, PyMuPdfAdapter])
class TestTextLayerAdapters:
    def test_extracts_text(self, adapter_cls: type, scope_pdf_bytes: bytes) -> None:
        result = adapter_cls().extract(scope_pdf_bytes, "application/pdf")
        assert "State Farm Claim 12-3456" in result.text
        assert "pipe jack" in result.text
        assert result.confidence == 1.0

    def test_joins_pages(self, adapter_cls: type, multi_page_pdf_bytes: bytes) -> None:
        text = adapter_cls().extract(multi_page_pdf_bytes, "application/pdf").text
        assert text.index("Roof summary") < text.index("Line items")

    def test_scanned_pdf_has_no_text_layer(self, adapter_cls: type, scanned_pdf_bytes: bytes) -> None:
        with pytest.raises(OcrError, match="no text layer"):
            adapter_cls().extract(scanned_pdf_bytes, "application/pdf")

    def test_rejects_images(self, adapter_cls: type) -> None:
        with pytest.raises(OcrError, match="cannot read 'image/png'"):
            adapter_cls().extract(b"\x89PNG", "image/png")

    def test_corrupt_pdf_raises(self, adapter_cls: type) -> None:
        with pytest.raises(OcrError, match="extraction failed"):
            adapter_cls().extract(b"not a pdf at all", "application/pdf")


def _mistral(handler) -> MistralOcrAdapter:
    return MistralOcrAdapter(
        api_key="mk",
        base_url="https://api.mistral.ai/v1/",
        model="pixtral-large-latest",
        max_tokens=16384,
        timeout_seconds=5,
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestMistralOcrAdapter:
    def test_payload_carries_data_uri(self) -> None:
        payload = build_ocr_payload(b"abc", "image/png", "pixtral", 100)
        content = payload["messages"][0]["content"]
        assert payload["model"] == "pixtral"
        assert payload["max_tokens"] == 100
        assert content[0]["type"] == "text"
        assert content[1]["image_url"]["url"] == "data:image/png;base64," + base64.b64encode(b"abc").decode()

    def test_returns_recognized_text(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": "RCV 15,000"}}]})

        result = _mistral(handler).extract(b"%PDF", "application/pdf")

        assert result == OcrResult(text="RCV 15,000", provider="mistral", confidence=0.9)
        assert seen["url"] == "https://api.mistral.ai/v1/chat/completions"
        assert seen["auth"] == "Bearer mk"
        assert seen["body"]["model"] == "pixtral-large-latest"

    def test_missing_content_gives_empty_text(self) -> None:
        result = _mistral(lambda request: httpx.Response(200, json={"choices": []})).extract(
            b"img", "image/jpeg"
        )
        assert result.text == ""

    def test_http_error_status(self) -> None:
        with pytest.raises(OcrNetworkError, match="Mistral OCR failed: 401"):
            _mistral(lambda request: httpx.Response(401)).extract(b"img", "image/png")

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(OcrNetworkError, match="network error"):
            _mistral(handler).extract(b"img", "image/png")

    def test_invalid_json_body(self) -> None:
        with pytest.raises(OcrError, match="invalid JSON"):
            _mistral(lambda request: httpx.Response(200, text="<html>")).extract(b"img", "image/png")


class TestOcrEngineFactory:
    def test_mistral_default(self) -> None:
        assert isinstance(OcrEngineFactory.create(Settings(ocr_engine="mistral")), MistralOcrAdapter)

    @pytest.mark.parametrize(
        ("engine", "adapter_cls"), [("pdfplumber", PdfPlumberAdapter), ("PyMuPDF", PyMuPdfAdapter)]
    )
    def test_text_layer_engines(self, engine: str, adapter_cls: type) -> None:
        assert isinstance(OcrEngineFactory.create(Settings(ocr_engine=engine)), adapter_cls)

    def test_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown OCR engine 'tesseract'"):
            OcrEngineFactory.create(Settings(ocr_engine="tesseract"))
