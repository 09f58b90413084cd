import pymupdf

from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.exceptions import OcrError
from roofquote.ocr.models import PDF_MIME_TYPE, OcrResult
from roofquote.ocr.pdfplumber_adapter import TEXT_LAYER_CONFIDENCE


class PyMuPdfAdapter(BaseOcrEngine):
    """Reads the embedded text layer of a PDF with PyMuPDF."""

    def extract(self, content: bytes, mime_type: str) -> OcrResult:
        if mime_type != PDF_MIME_TYPE:
            raise OcrError(f"pymupdf cannot read '{mime_type}' content")
        try:
            with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise OcrError(f"pymupdf extraction failed: {exc}") from exc

        text = "\n".join(pages).strip()
        if not text:
            raise OcrError("PDF has no text layer")
        return OcrResult(text=text, provider="pymupdf", confidence=TEXT_LAYER_CONFIDENCE)
