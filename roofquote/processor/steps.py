from dataclasses import asdict

from roofquote.database.repositories.analysis_repository import AnalysisRepository
from roofquote.database.repositories.document_repository import DocumentRepository
from roofquote.extraction.aerial_extractor import AerialExtractor
from roofquote.extraction.classifier import DocumentClassifier
from roofquote.extraction.insurance_extractor import InsuranceExtractor, hints_from_aerial
from roofquote.extraction.models import (
    INSURANCE_DOCUMENT_TYPES,
    AerialExtraction,
    InsuranceExtraction,
)
from roofquote.extraction.validation import (
    empty_validation,
    validate_aerial_extraction,
    validate_insurance_extraction,
)
from roofquote.logging.logger import Log
from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.models import PDF_MIME_TYPE, OcrResult, needs_ocr
from roofquote.processor.pipeline import PipelineContext, PipelineStep
from roofquote.storage.base import BaseStorage

AERIAL_DOCUMENT_TYPE = "aerial_report"
DIRECT_TEXT_PROVIDER = "direct"


def _document_type(context: PipelineContext) -> str:
    if context.classification is None:
        raise ValueError("PipelineContext.classification must be set before extraction")
    return context.classification.type


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        self._doc_repo.mark_failed(context.document_id, context.error_message)
        Log.error(f"Document {context.document_id} marked as failed: {context.error_message}")
        return context


class DownloadStep(PipelineStep):
    def __init__(self, storage: BaseStorage) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._storage.download(context.document.s3_key)
        Log.info(f"Downloaded {len(context.raw_bytes)} bytes for document {context.document_id}")
        return context


class OcrStep(PipelineStep):
    """Recognizes PDFs and images, reads anything else as UTF-8, then persists the text."""

    def __init__(self, ocr_engine: BaseOcrEngine, doc_repo: DocumentRepository) -> None:
        self._ocr_engine = ocr_engine
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        mime_type = context.document.mime_type or PDF_MIME_TYPE
        if needs_ocr(mime_type):
            result = self._ocr_engine.extract(context.raw_bytes, mime_type)
        else:
            result = OcrResult(
                text=context.raw_bytes.decode("utf-8", errors="replace"),
                provider=DIRECT_TEXT_PROVIDER,
                confidence=1.0,
            )
        context.ocr_result = result
        self._doc_repo.update_ocr_result(
            context.document_id, result.text, result.provider, result.confidence
        )
        Log.info(
            f"OCR produced {len(result.text)} chars for document {context.document_id} "
            f"via {result.provider}"
        )
        return context


class ClassifyStep(PipelineStep):
    def __init__(self, classifier: DocumentClassifier, doc_repo: DocumentRepository) -> None:
        self._classifier = classifier
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        classification = self._classifier.classify(context.text)
        context.classification = classification
        self._doc_repo.update_classification(
            context.document_id, classification.type, classification.subtype
        )
        Log.info(
            f"Document {context.document_id} classified as {classification.type}"
            + (f"/{classification.subtype}" if classification.subtype else "")
        )
        return context


class ExtractInsuranceStep(PipelineStep):
    """Runs for scopes and supplements only.

    Cross-check hints come from the job's latest aerial report when there is one.
    """

    def __init__(
        self, insurance_extractor: InsuranceExtractor, analysis_repo: AnalysisRepository
    ) -> None:
        self._insurance_extractor = insurance_extractor
        self._analysis_repo = analysis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if _document_type(context) not in INSURANCE_DOCUMENT_TYPES:
            return context
        aerial = self._analysis_repo.find_latest_aerial_report(context.document.job_id)
        hints = hints_from_aerial(aerial) if aerial is not None else None
        extraction = self._insurance_extractor.extract(context.text, hints)
        context.extraction = extraction
        context.validation = validate_insurance_extraction(extraction)
        return context


class PersistInsuranceStep(PipelineStep):
    def __init__(self, analysis_repo: AnalysisRepository) -> None:
        self._analysis_repo = analysis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if not isinstance(context.extraction, InsuranceExtraction):
            return context
        self._analysis_repo.save_insurance_analysis(
            context.document.job_id, context.document_id, context.extraction
        )
        Log.info(
            f"Insurance analysis stored for job {context.document.job_id}: "
            f"{len(context.extraction.line_items)} line items"
        )
        return context


class ExtractAerialStep(PipelineStep):
    def __init__(self, aerial_extractor: AerialExtractor) -> None:
        self._aerial_extractor = aerial_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if _document_type(context) != AERIAL_DOCUMENT_TYPE:
            return context
        provider_hint = context.classification.subtype if context.classification else None
        extraction = self._aerial_extractor.extract(context.text, provider_hint)
        context.extraction = extraction
        context.validation = validate_aerial_extraction(extraction)
        return context


class PersistAerialStep(PipelineStep):
    def __init__(self, analysis_repo: AnalysisRepository) -> None:
        self._analysis_repo = analysis_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if not isinstance(context.extraction, AerialExtraction):
            return context
        self._analysis_repo.save_aerial_report(
            context.document.job_id, context.document_id, context.extraction
        )
        Log.info(f"Aerial report stored for job {context.document.job_id}")
        return context


class CompleteStep(PipelineStep):
    """Stores the final payload. Unextracted types complete with an empty one."""

    def __init__(self, doc_repo: DocumentRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.validation is None:
            context.validation = empty_validation()
        payload = asdict(context.extraction) if context.extraction is not None else {}
        validation_errors = asdict(context.validation) if context.validation.errors else None
        self._doc_repo.mark_completed(context.document_id, payload, validation_errors)
        Log.info(
            f"Document {context.document_id} completed "
            f"(valid={context.validation.is_valid}, "
            f"warnings={len(context.validation.warnings)})"
        )
        return context
