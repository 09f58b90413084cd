from abc import ABC, abstractmethod

from roofquote.ocr.models import OcrResult


class BaseOcrEngine(ABC):
    """Contract for all OCR engine adapters."""

    @abstractmethod
    def extract(self, content: bytes, mime_type: str) -> OcrResult:
        """Recognize the text of a PDF or image.

        Args:
            content: Raw file bytes.
            mime_type: ``application/pdf`` or an ``image/*`` type.

        Returns:
            The recognized text with provider name and confidence.

        Raises:
            OcrError: if the content cannot be read.
            OcrNetworkError: if a remote engine is unavailable.
        """
