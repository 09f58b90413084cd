from dataclasses import dataclass

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class OcrResult:
    text: str
    provider: str
    confidence: float


def needs_ocr(mime_type: str) -> bool:
    """PDFs and images go through an OCR engine; anything else is read as text."""
    return mime_type == PDF_MIME_TYPE or mime_type.startswith("image/")
