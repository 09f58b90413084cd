from unittest.mock import MagicMock

import pytest

from roofquote.database.models import DocumentRecord
from roofquote.database.repositories.analysis_repository import AnalysisRepository
from roofquote.database.repositories.document_repository import DocumentRepository
from roofquote.extraction.aerial_extractor import AerialExtractor
from roofquote.extraction.classifier import DocumentClassifier
from roofquote.extraction.insurance_extractor import InsuranceExtractor
from roofquote.extraction.models import (
    AerialExtraction,
    Classification,
    ConfidenceScores,
    ExtractionHints,
    FinancialSummary,
    HeaderData,
    InsuranceExtraction,
    PipeJackResult,
    RoofMeasurements,
    Structure,
    ValidationResult,
    VentResult,
)
from roofquote.ocr.base import BaseOcrEngine
from roofquote.ocr.models import OcrResult
from roofquote.processor.pipeline import PipelineContext
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
from roofquote.storage.base import BaseStorage


def _make_document(mime_type: str | None = "application/pdf") -> DocumentRecord:
    return DocumentRecord(
        id="doc-1",
        organization_id="org-1",
        job_id="job-1",
        name="scope.pdf",
        s3_key="org-1/job-1/scope.pdf",
        mime_type=mime_type,
        file_size=2048,
        processing_status="processing",
    )


def _context(
    document_type: str | None = None,
    subtype: str | None = None,
    text: str = "scope text",
) -> PipelineContext:
    context = PipelineContext(document=_make_document())
    context.ocr_result = OcrResult(text=text, provider="mistral", confidence=0.9)
    if document_type is not None:
        context.classification = Classification(type=document_type, subtype=subtype)
    return context


def _insurance_extraction(total_rcv: float = 15000.0, overall: float = 0.85) -> InsuranceExtraction:
    return InsuranceExtraction(
        header_data=HeaderData(insurance_company="State Farm"),
        roof_measurements=RoofMeasurements(total_area=24),
        pipe_jacks=PipeJackResult(pf3n1=3, total_count=3, confidence=0.9),
        ventilation=VentResult(vs_turtle_vent=4, total_exhaust=4, confidence=0.9),
        materials=[],
        financial_summary=FinancialSummary(total_rcv=total_rcv, total_acv=12000.0),
        line_items=[],
        confidence_scores=ConfidenceScores(0.9, 0.9, 0.9, 0.8, 0.8, overall),
    )


class TestDownloadStep:
    def test_downloads_by_storage_key(self) -> None:
        storage = MagicMock(spec=BaseStorage)
        storage.download.return_value = b"%PDF-1.7"
        context = PipelineContext(document=_make_document())

        result = DownloadStep(storage).run(context)

        storage.download.assert_called_once_with("org-1/job-1/scope.pdf")
        assert result.raw_bytes == b"%PDF-1.7"


class TestOcrStep:
    def test_pdf_goes_through_engine(self) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.extract.return_value = OcrResult(text="Scope", provider="mistral", confidence=0.9)
        doc_repo = MagicMock(spec=DocumentRepository)
        context = PipelineContext(document=_make_document(), raw_bytes=b"%PDF")

        result = OcrStep(engine, doc_repo).run(context)

        engine.extract.assert_called_once_with(b"%PDF", "application/pdf")
        assert result.text == "Scope"
        doc_repo.update_ocr_result.assert_called_once_with("doc-1", "Scope", "mistral", 0.9)

    def test_missing_mime_type_treated_as_pdf(self) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        engine.extract.return_value = OcrResult(text="x", provider="mistral", confidence=0.9)
        context = PipelineContext(document=_make_document(mime_type=None), raw_bytes=b"%PDF")

        OcrStep(engine, MagicMock(spec=DocumentRepository)).run(context)

        assert engine.extract.call_args.args[1] == "application/pdf"

    def test_plain_text_read_directly(self) -> None:
        engine = MagicMock(spec=BaseOcrEngine)
        doc_repo = MagicMock(spec=DocumentRepository)
        context = PipelineContext(
            document=_make_document(mime_type="text/plain"), raw_bytes="Total RCV $1,000".encode()
        )

        result = OcrStep(engine, doc_repo).run(context)

        engine.extract.assert_not_called()
        assert result.ocr_result == OcrResult(text="Total RCV $1,000", provider="direct", confidence=1.0)
        doc_repo.update_ocr_result.assert_called_once_with("doc-1", "Total RCV $1,000", "direct", 1.0)


class TestClassifyStep:
    def test_persists_classification(self) -> None:
        classifier = MagicMock(spec=DocumentClassifier)
        classifier.classify.return_value = Classification(type="insurance_scope", subtype="state_farm")
        doc_repo = MagicMock(spec=DocumentRepository)

        result = ClassifyStep(classifier, doc_repo).run(_context())

        classifier.classify.assert_called_once_with("scope text")
        assert result.classification == Classification(type="insurance_scope", subtype="state_farm")
        doc_repo.update_classification.assert_called_once_with("doc-1", "insurance_scope", "state_farm")

    def test_requires_ocr_text(self) -> None:
        step = ClassifyStep(MagicMock(spec=DocumentClassifier), MagicMock(spec=DocumentRepository))

        with pytest.raises(ValueError):
            step.run(PipelineContext(document=_make_document()))


class TestExtractInsuranceStep:
    def _make_step(
        self, aerial: AerialExtraction | None = None
    ) -> tuple[ExtractInsuranceStep, MagicMock, MagicMock]:
        extractor = MagicMock(spec=InsuranceExtractor)
        extractor.extract.return_value = _insurance_extraction()
        analysis_repo = MagicMock(spec=AnalysisRepository)
        analysis_repo.find_latest_aerial_report.return_value = aerial
        return ExtractInsuranceStep(extractor, analysis_repo), extractor, analysis_repo

    @pytest.mark.parametrize("document_type", ["insurance_scope", "supplement"])
    def test_extracts_insurance_documents(self, document_type: str) -> None:
        step, extractor, analysis_repo = self._make_step()

        result = step.run(_context(document_type))

        analysis_repo.find_latest_aerial_report.assert_called_once_with("job-1")
        extractor.extract.assert_called_once_with("scope text", None)
        assert isinstance(result.extraction, InsuranceExtraction)
        assert result.validation is not None
        assert result.validation.is_valid is True

    def test_uses_aerial_report_as_hints(self) -> None:
        aerial = AerialExtraction(
            provider="eagleview",
            total_area=2400,
            ridge_length=45,
            structures=[Structure("House", 2000), Structure("Garage", 400)],
        )
        step, extractor, _repo = self._make_step(aerial)

        step.run(_context("insurance_scope"))

        hints = extractor.extract.call_args.args[1]
        assert hints == ExtractionHints(roof_area=2400, ridge_length=45, structure_count=2)

    @pytest.mark.parametrize("document_type", ["aerial_report", "photo", "other"])
    def test_skips_other_types(self, document_type: str) -> None:
        step, extractor, _repo = self._make_step()

        result = step.run(_context(document_type))

        extractor.extract.assert_not_called()
        assert result.extraction is None

    def test_missing_rcv_is_invalid(self) -> None:
        step, extractor, _repo = self._make_step()
        extractor.extract.return_value = _insurance_extraction(total_rcv=0.0)

        result = step.run(_context("insurance_scope"))

        assert result.validation is not None
        assert result.validation.errors == ["Missing total RCV value"]


class TestPersistInsuranceStep:
    def test_saves_insurance_extraction(self) -> None:
        analysis_repo = MagicMock(spec=AnalysisRepository)
        context = _context("insurance_scope")
        context.extraction = _insurance_extraction()

        PersistInsuranceStep(analysis_repo).run(context)

        analysis_repo.save_insurance_analysis.assert_called_once_with(
            "job-1", "doc-1", context.extraction
        )

    def test_ignores_aerial_extraction(self) -> None:
        analysis_repo = MagicMock(spec=AnalysisRepository)
        context = _context("aerial_report")
        context.extraction = AerialExtraction(total_area=2400)

        PersistInsuranceStep(analysis_repo).run(context)

        analysis_repo.save_insurance_analysis.assert_not_called()


class TestAerialSteps:
    def test_extracts_with_provider_hint(self) -> None:
        extractor = MagicMock(spec=AerialExtractor)
        extractor.extract.return_value = AerialExtraction(provider="hover", total_area=0)

        result = ExtractAerialStep(extractor).run(_context("aerial_report", subtype="hover"))

        extractor.extract.assert_called_once_with("scope text", "hover")
        assert result.validation is not None
        assert result.validation.errors == ["Missing total roof area"]

    def test_skips_insurance_documents(self) -> None:
        extractor = MagicMock(spec=AerialExtractor)

        ExtractAerialStep(extractor).run(_context("insurance_scope"))

        extractor.extract.assert_not_called()

    def test_persists_aerial_report(self) -> None:
        analysis_repo = MagicMock(spec=AnalysisRepository)
        context = _context("aerial_report")
        context.extraction = AerialExtraction(provider="hover", total_area=2400)

        PersistAerialStep(analysis_repo).run(context)

        analysis_repo.save_aerial_report.assert_called_once_with("job-1", "doc-1", context.extraction)


class TestCompleteStep:
    def test_valid_extraction_has_no_validation_errors(self) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        context = _context("insurance_scope")
        context.extraction = _insurance_extraction()
        context.validation = ValidationResult(is_valid=True, warnings=["Low ventilation"])

        CompleteStep(doc_repo).run(context)

        document_id, payload, validation_errors = doc_repo.mark_completed.call_args.args
        assert document_id == "doc-1"
        assert payload["financial_summary"]["total_rcv"] == 15000.0
        assert validation_errors is None

    def test_errors_are_stored(self) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        context = _context("aerial_report")
        context.extraction = AerialExtraction()
        context.validation = ValidationResult(is_valid=False, errors=["Missing total roof area"])

        CompleteStep(doc_repo).run(context)

        validation_errors = doc_repo.mark_completed.call_args.args[2]
        assert validation_errors["errors"] == ["Missing total roof area"]
        assert validation_errors["is_valid"] is False

    def test_unextracted_type_completes_with_empty_payload(self) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        context = _context("photo")

        result = CompleteStep(doc_repo).run(context)

        doc_repo.mark_completed.assert_called_once_with("doc-1", {}, None)
        assert result.validation == ValidationResult(is_valid=True)


class TestMarkFailedStep:
    def test_stores_error_message(self) -> None:
        doc_repo = MagicMock(spec=DocumentRepository)
        context = _context()
        context.error_message = "Document has no text"

        MarkFailedStep(doc_repo).run(context)

        doc_repo.mark_failed.assert_called_once_with("doc-1", "Document has no text")
