from dataclasses import dataclass

from roofquote.extraction.models import AerialExtraction, InsuranceExtraction, ValidationResult

Extraction = InsuranceExtraction | AerialExtraction


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one pipeline run. Failures are reported here, never raised."""

    success: bool
    document_id: str
    document_type: str | None = None
    extraction: Extraction | None = None
    validation: ValidationResult | None = None
    error: str | None = None
