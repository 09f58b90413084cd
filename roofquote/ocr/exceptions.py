class OcrError(Exception):
    """Base exception for OCR failures."""


class OcrNetworkError(OcrError):
    """Raised when the OCR provider cannot be reached or rejects the request."""
