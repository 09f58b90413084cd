"""Domain validation of assembled extractions.

Errors make an extraction invalid; warnings never do. Neither fails the
document, which still completes with the result attached for review.
"""

from roofquote.extraction.models import AerialExtraction, InsuranceExtraction, ValidationResult

LOW_CONFIDENCE_THRESHOLD = 0.7


def validate_insurance_extraction(extraction: InsuranceExtraction) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not extraction.financial_summary.total_rcv:
        errors.append("Missing total RCV value")

    warnings.extend(extraction.pipe_jacks.validation_notes)
    warnings.extend(extraction.ventilation.validation_notes)

    overall = extraction.confidence_scores.overall
    if overall < LOW_CONFIDENCE_THRESHOLD:
        warnings.append(f"Overall extraction confidence is low ({overall * 100:.0f}%)")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_aerial_extraction(extraction: AerialExtraction) -> ValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    if not extraction.total_area:
        errors.append("Missing total roof area")
    if not extraction.slopes:
        warnings.append("No slope information extracted")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def empty_validation() -> ValidationResult:
    """Result for document types that are not extracted."""
    return ValidationResult(is_valid=True)
