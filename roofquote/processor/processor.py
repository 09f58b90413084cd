from roofquote.config.settings import Settings
from roofquote.database.repositories.analysis_repository import AnalysisRepository
from roofquote.database.repositories.document_repository import DocumentRepository
from roofquote.extraction.aerial_extractor import AerialExtractor
from roofquote.extraction.classifier import DocumentClassifier
from roofquote.extraction.factory import ExtractionCapabilityFactory
from roofquote.extraction.header_extractor import HeaderExtractor
from roofquote.extraction.insurance_extractor import InsuranceExtractor
from roofquote.extraction.materials_extractor import MaterialsExtractor
from roofquote.extraction.pipe_jack_extractor import PipeJackExtractor
from roofquote.extraction.vent_extractor import VentExtractor
from roofquote.logging.logger import Log
from roofquote.ocr.factory import OcrEngineFactory
from roofquote.processor.models import ProcessingResult
from roofquote.processor.pipeline import PipelineContext, PipelineStep
from roofquote.processor.steps import (
    ClassifyStep,
    CompleteStep,
    DownloadStep,
    ExtractAerialStep,
    ExtractInsuranceStep,
    MarkFailedStep,
    OcrStep,
    PersistAerialStep,
    PersistInsuranceStep,
)
from roofquote.storage.factory import StorageFactory

NOT_FOUND_ERROR = "Document not found"
ALREADY_PROCESSING_ERROR = "Document is already being processed"


class DocumentProcessor:
    """Runs a document through the pipeline: download, OCR, classify, extract, complete.

    The document is claimed before any step runs; a document another run
    holds is left untouched. Once claimed, any exception from a step marks
    the document failed and is reported in the result rather than raised,
    even when recording the failure itself fails.
    """

    def __init__(
        self,
        doc_repo: DocumentRepository,
        steps: list[PipelineStep],
        failed_step: PipelineStep,
    ) -> None:
        self._doc_repo = doc_repo
        self._steps = steps
        self._failed_step = failed_step

    def process_document(self, document_id: str, organization_id: str) -> ProcessingResult:
        Log.info(f"Processing document {document_id} for organization {organization_id}")
        document = self._doc_repo.find_by_id(document_id, organization_id)
        if document is None:
            return ProcessingResult(success=False, document_id=document_id, error=NOT_FOUND_ERROR)
        if not self._doc_repo.claim_for_processing(document_id, organization_id):
            Log.warning(f"Document {document_id} is already being processed, skipping")
            return ProcessingResult(
                success=False, document_id=document_id, error=ALREADY_PROCESSING_ERROR
            )

        context = PipelineContext(document=document)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc) or "Unknown error"
            try:
                self._failed_step.run(context)
            except Exception as mark_exc:
                Log.error(
                    f"Could not record failure for document {document_id}: {mark_exc}"
                )
            return ProcessingResult(
                success=False, document_id=document_id, error=context.error_message
            )

        return ProcessingResult(
            success=True,
            document_id=document_id,
            document_type=context.classification.type if context.classification else None,
            extraction=context.extraction,
            validation=context.validation,
        )

    def reprocess(self, document_id: str, organization_id: str) -> ProcessingResult:
        """Clear prior results and run the whole pipeline again."""
        if self._doc_repo.find_by_id(document_id, organization_id) is None:
            return ProcessingResult(success=False, document_id=document_id, error=NOT_FOUND_ERROR)
        if not self._doc_repo.reset_for_reprocess(document_id, organization_id):
            return ProcessingResult(
                success=False, document_id=document_id, error=ALREADY_PROCESSING_ERROR
            )
        Log.info(f"Document {document_id} reset for reprocessing")
        return self.process_document(document_id, organization_id)


def build_insurance_extractor(settings: Settings) -> InsuranceExtractor:
    capability = ExtractionCapabilityFactory.create(settings)
    return InsuranceExtractor(
        header_extractor=HeaderExtractor(capability),
        pipe_jack_extractor=PipeJackExtractor(capability),
        vent_extractor=VentExtractor(capability),
        materials_extractor=MaterialsExtractor(capability),
        max_workers=settings.extraction_max_workers,
    )


def build_processor(settings: Settings) -> DocumentProcessor:
    """Build a DocumentProcessor with all required adapters."""
    doc_repo = DocumentRepository(stale_after_seconds=settings.processing_stale_after_seconds)
    analysis_repo = AnalysisRepository()
    classifier = DocumentClassifier(
        ExtractionCapabilityFactory.create_classifier(settings),
        max_chars=settings.classifier_max_chars,
    )
    aerial_extractor = AerialExtractor(ExtractionCapabilityFactory.create(settings))
    steps: list[PipelineStep] = [
        DownloadStep(StorageFactory.create(settings)),
        OcrStep(OcrEngineFactory.create(settings), doc_repo),
        ClassifyStep(classifier, doc_repo),
        ExtractInsuranceStep(build_insurance_extractor(settings), analysis_repo),
        PersistInsuranceStep(analysis_repo),
        ExtractAerialStep(aerial_extractor),
        PersistAerialStep(analysis_repo),
        CompleteStep(doc_repo),
    ]
    return DocumentProcessor(doc_repo=doc_repo, steps=steps, failed_step=MarkFailedStep(doc_repo))
