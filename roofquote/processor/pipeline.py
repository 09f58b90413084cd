from abc import ABC, abstractmethod
from dataclasses import dataclass

from roofquote.database.models import DocumentRecord
from roofquote.extraction.models import Classification, ValidationResult
from roofquote.ocr.models import OcrResult
from roofquote.processor.models import Extraction


@dataclass(slots=True)
class PipelineContext:
    document: DocumentRecord
    raw_bytes: bytes = b""
    ocr_result: OcrResult | None = None
    classification: Classification | None = None
    extraction: Extraction | None = None
    validation: ValidationResult | None = None
    error_message: str = ""

    @property
    def document_id(self) -> str:
        return self.document.id

    @property
    def text(self) -> str:
        if self.ocr_result is None:
            raise ValueError("PipelineContext.ocr_result must be set before reading text")
        return self.ocr_result.text


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
