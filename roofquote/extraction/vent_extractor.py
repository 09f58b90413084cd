"""Ventilation extraction, net free area and intake/exhaust balance."""

import math
from typing import Any

from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.coercion import (
    normalize_unit,
    read_confidence,
    read_list,
    read_quantity,
    read_str,
    read_str_list,
)
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import (
    EXHAUST_COUNTERS,
    ExtractionHints,
    OtherVent,
    VentilationAssessment,
    VentResult,
)
from roofquote.logging.logger import Log

DEFAULT_CONFIDENCE = 0.5

# Net free area, square inches
RIDGE_VENT_NFA_PER_LF = 18
TURTLE_VENT_NFA = 50
BROAN4_NFA = 28
BROAN6_NFA = 50

SQ_IN_PER_SQ_FT = 144
BALANCED_VENTILATION_RATIO = 300  # 1 sq ft NFA per 300 sq ft of roof
NFA_SHORTFALL_THRESHOLD = 0.8
RIDGE_OVERRUN_TOLERANCE = 1.1
RIDGE_OVERRUN_PENALTY = 0.85
MIN_BALANCE_RATIO = 0.5
MAX_BALANCE_RATIO = 2.0

_RESPONSE_FIELDS = {
    "vsTurtleVent": "vs_turtle_vent",
    "vsRidgeVent": "vs_ridge_vent",
    "vsIntakeVent": "vs_intake_vent",
    "vsOffRidgeVent": "vs_off_ridge_vent",
    "vsBroan4": "vs_broan4",
    "vsBroan6": "vs_broan6",
    "vsPowerVent": "vs_power_vent",
    "vsGableVent": "vs_gable_vent",
    "vsWhirlybird": "vs_whirlybird",
    "hvacVent": "hvac_vent",
}


def calculate_nfa(result: VentResult) -> float:
    return (
        result.vs_ridge_vent * RIDGE_VENT_NFA_PER_LF
        + result.vs_turtle_vent * TURTLE_VENT_NFA
        + result.vs_broan4 * BROAN4_NFA
        + result.vs_broan6 * BROAN6_NFA
    )


def required_nfa(roof_area: float) -> float:
    """NFA in square inches for ``roof_area`` square feet at the 1:300 ratio."""
    return (roof_area / BALANCED_VENTILATION_RATIO) * SQ_IN_PER_SQ_FT


def check_nfa(result: VentResult, roof_area: float | None) -> None:
    """Informational only, confidence is untouched."""
    if not roof_area:
        return
    required = required_nfa(roof_area)
    if result.nfa < required * NFA_SHORTFALL_THRESHOLD:
        result.validation_notes.append(
            f"Exhaust ventilation ({result.nfa:g} sq in NFA) may be insufficient for "
            f"{roof_area:g} sq ft roof (recommended: {required:g} sq in)"
        )


def apply_ridge_overrun_penalty(result: VentResult, ridge_length: float) -> None:
    result.validation_notes.append(
        f"Ridge vent length ({result.vs_ridge_vent:g} LF) exceeds ridge length "
        f"({ridge_length:g} LF)"
    )
    result.confidence *= RIDGE_OVERRUN_PENALTY


def check_ridge_length(result: VentResult, ridge_length: float | None) -> None:
    if not ridge_length or result.vs_ridge_vent <= 0:
        return
    if result.vs_ridge_vent > ridge_length * RIDGE_OVERRUN_TOLERANCE:
        apply_ridge_overrun_penalty(result, ridge_length)


def determine_balance(result: VentResult) -> bool:
    """Ridge systems are assumed balanced; otherwise intake must be within
    half to double the exhaust count."""
    if result.vs_ridge_vent > 0:
        return True
    if result.total_intake > 0 and result.total_exhaust > 0:
        ratio = result.total_intake / result.total_exhaust
        if ratio < MIN_BALANCE_RATIO or ratio > MAX_BALANCE_RATIO:
            result.validation_notes.append(
                f"Intake/exhaust ratio ({ratio:.2f}) may indicate unbalanced ventilation"
            )
            return False
        return True
    if result.total_exhaust > 0:
        result.validation_notes.append(
            "No intake ventilation detected - verify soffit vents are included"
        )
    return False


def cross_validate(result: VentResult, hints: ExtractionHints) -> VentResult:
    """Area and ridge checks first, then the balance rule."""
    check_nfa(result, hints.roof_area)
    check_ridge_length(result, hints.ridge_length)
    result.is_balanced = determine_balance(result)
    return result


def assess_ventilation_adequacy(result: VentResult, roof_area: float) -> VentilationAssessment:
    """Compare NFA to the requirement and size the missing exhaust two ways."""
    required = required_nfa(roof_area)
    if result.nfa >= required:
        return VentilationAssessment(
            is_adequate=True,
            recommendation="Ventilation appears adequate for roof size",
            required_nfa=required,
        )
    deficit = required - result.nfa
    return VentilationAssessment(
        is_adequate=False,
        recommendation=f"Ventilation deficit of {round(deficit)} sq in NFA detected",
        required_nfa=required,
        deficit=deficit,
        suggested_additions={
            "vs_ridge_vent": math.ceil(deficit / RIDGE_VENT_NFA_PER_LF),
            "vs_turtle_vent": math.ceil(deficit / TURTLE_VENT_NFA),
        },
    )


def build_vent_result(data: dict[str, Any]) -> VentResult:
    """Fully populated result with totals, NFA and balance computed locally."""
    result = VentResult(
        confidence=read_confidence(data, DEFAULT_CONFIDENCE),
        validation_notes=read_str_list(data, "validationNotes"),
    )
    for response_key, attr in _RESPONSE_FIELDS.items():
        setattr(result, attr, read_quantity(data, response_key))
    result.vs_other = [
        OtherVent(
            description=read_str(item, "description", "Unspecified vent"),
            quantity=read_quantity(item, "quantity"),
            unit=normalize_unit(read_str(item, "unit", "EA")),
        )
        for item in read_list(data, "vsOther")
        if isinstance(item, dict)
    ]
    return finalize_vent_result(result)


def finalize_vent_result(result: VentResult) -> VentResult:
    result.total_exhaust = sum(getattr(result, name) for name in EXHAUST_COUNTERS)
    result.total_intake = result.vs_intake_vent
    result.nfa = calculate_nfa(result)
    return result


class VentExtractor(SchemaExtractor):
    """Extracts ventilation component quantities from scope text."""

    PROMPT_NAME = "vents"

    def extract(
        self,
        text: str,
        ridge_length_hint: float | None = None,
        roof_area_hint: float | None = None,
    ) -> VentResult:
        result = cross_validate(
            self.extract_counts(text),
            ExtractionHints(roof_area=roof_area_hint, ridge_length=ridge_length_hint),
        )
        Log.info(
            f"Vents extracted: exhaust={result.total_exhaust:g} intake={result.total_intake:g} "
            f"nfa={result.nfa:g} balanced={result.is_balanced}"
        )
        return result

    def extract_counts(self, text: str) -> VentResult:
        """Counts, totals and NFA only. Callers run ``cross_validate`` once hints are known."""
        parsed = self._request(
            "Extract ALL ventilation component quantities from this insurance "
            f"document. Be thorough:\n\n{text}"
        )
        if isinstance(parsed, Fallback):
            result = finalize_vent_result(
                VentResult(
                    confidence=DEFAULT_CONFIDENCE,
                    validation_notes=["Vent extraction response could not be parsed"],
                )
            )
        else:
            result = build_vent_result(parsed.value)
        return result
