import io

import pdfplumber

from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.exceptions import OcrError
from roofquote.ocr.models import PDF_MIME_TYPE, OcrResult

TEXT_LAYER_CONFIDENCE = 1.0


class PdfPlumberAdapter(BaseOcrEngine):
    """Reads the embedded text layer of a PDF with pdfplumber.

    Scanned PDFs and images have no text layer; use the Mistral engine for those.
    """

    def extract(self, content: bytes, mime_type: str) -> OcrResult:
        if mime_type != PDF_MIME_TYPE:
            raise OcrError(f"pdfplumber cannot read '{mime_type}' content")
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise OcrError(f"pdfplumber extraction failed: {exc}") from exc

        text = "\n".join(pages).strip()
        if not text:
            raise OcrError("PDF has no text layer")
        return OcrResult(text=text, provider="pdfplumber", confidence=TEXT_LAYER_CONFIDENCE)
