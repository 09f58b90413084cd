from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.capability import ExtractionCapability
from roofquote.extraction.coercion import read_optional_str
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import DOCUMENT_TYPES, Classification
from roofquote.logging.logger import Log


class DocumentClassifier(SchemaExtractor):
    """Decides which extractors run for a document.

    Only a bounded prefix of the text is sent; the first pages of a scope or
    aerial report identify it. Any unusable answer classifies as ``other``.
    """

    PROMPT_NAME = "classification"
    MAX_TOKENS = 256

    def __init__(self, capability: ExtractionCapability, max_chars: int = 4000) -> None:
        super().__init__(capability)
        self._max_chars = max_chars

    def classify(self, text: str) -> Classification:
        result = self._request(f"Classify this document:\n\n{text[: self._max_chars]}")
        if isinstance(result, Fallback):
            return Classification()

        doc_type = (read_optional_str(result.value, "type") or "").lower()
        if doc_type not in DOCUMENT_TYPES:
            Log.warning(f"Classifier returned unknown type {doc_type!r}, using 'other'")
            return Classification()
        subtype = read_optional_str(result.value, "subType") or read_optional_str(
            result.value, "subtype"
        )
        return Classification(type=doc_type, subtype=subtype.lower() if subtype else None)
