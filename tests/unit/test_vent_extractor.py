import pytest

from roofquote.extraction.models import ExtractionHints, VentResult
from roofquote.extraction.vent_extractor import (
    VentExtractor,
    assess_ventilation_adequacy,
    build_vent_result,
    calculate_nfa,
    check_nfa,
    check_ridge_length,
    cross_validate,
    determine_balance,
    finalize_vent_result,
    required_nfa,
)


class TestNfa:
    def test_nfa_formula(self) -> None:
        result = VentResult(vs_ridge_vent=10, vs_turtle_vent=2, vs_broan4=1, vs_broan6=1)
        assert calculate_nfa(result) == 10 * 18 + 2 * 50 + 28 + 50

    def test_required_nfa_for_3000_sq_ft(self) -> None:
        assert required_nfa(3000) == pytest.approx(1440)

    def test_insufficient_nfa_adds_note(self) -> None:
        result = finalize_vent_result(VentResult(vs_turtle_vent=10, confidence=0.9))
        assert result.nfa == 500
        check_nfa(result, 3000)
        assert result.validation_notes == [
            "Exhaust ventilation (500 sq in NFA) may be insufficient for 3000 sq ft roof "
            "(recommended: 1440 sq in)"
        ]
        assert result.confidence == 0.9

    def test_sufficient_nfa_is_quiet(self) -> None:
        result = finalize_vent_result(VentResult(vs_ridge_vent=70))
        check_nfa(result, 3000)
        assert result.validation_notes == []


class TestTotals:
    def test_exhaust_sums_named_counters(self) -> None:
        result = build_vent_result(
            {
                "vsTurtleVent": 2,
                "vsOffRidgeVent": 1,
                "vsBroan4": 1,
                "vsBroan6": 1,
                "vsPowerVent": 1,
                "vsWhirlybird": 1,
                "vsGableVent": 4,
                "hvacVent": 3,
                "vsIntakeVent": 6,
            }
        )
        assert result.total_exhaust == 7
        assert result.total_intake == 6
        assert result.nfa == 2 * 50 + 28 + 50


class TestRidgeLength:
    def test_overrun_penalizes(self) -> None:
        result = VentResult(vs_ridge_vent=60, confidence=1.0)
        check_ridge_length(result, 50)
        assert result.confidence == pytest.approx(0.85)
        assert "exceeds ridge length" in result.validation_notes[0]

    def test_within_tolerance_is_untouched(self) -> None:
        result = VentResult(vs_ridge_vent=54, confidence=1.0)
        check_ridge_length(result, 50)
        assert result.confidence == 1.0


class TestBalance:
    def test_ridge_vent_is_always_balanced(self) -> None:
        result = finalize_vent_result(VentResult(vs_ridge_vent=30, vs_turtle_vent=4))
        assert determine_balance(result) is True
        assert result.validation_notes == []

    def test_no_intake_is_unbalanced(self) -> None:
        result = finalize_vent_result(VentResult(vs_turtle_vent=4))
        assert determine_balance(result) is False
        assert result.validation_notes == [
            "No intake ventilation detected - verify soffit vents are included"
        ]

    def test_low_ratio_is_unbalanced(self) -> None:
        result = finalize_vent_result(VentResult(vs_intake_vent=3, vs_turtle_vent=10))
        assert determine_balance(result) is False
        assert result.validation_notes == [
            "Intake/exhaust ratio (0.30) may indicate unbalanced ventilation"
        ]

    def test_ratio_in_range_is_balanced(self) -> None:
        result = finalize_vent_result(VentResult(vs_intake_vent=8, vs_turtle_vent=8))
        assert determine_balance(result) is True

    def test_nothing_extracted_is_unbalanced_without_note(self) -> None:
        result = finalize_vent_result(VentResult())
        assert determine_balance(result) is False
        assert result.validation_notes == []


class TestCrossValidate:
    def test_applies_nfa_and_ridge_checks(self) -> None:
        result = finalize_vent_result(VentResult(vs_ridge_vent=60, confidence=1.0))
        cross_validate(result, ExtractionHints(roof_area=3000, ridge_length=40))
        assert result.confidence == pytest.approx(0.85)
        assert len(result.validation_notes) == 2

    def test_balance_note_comes_after_area_and_ridge_notes(self) -> None:
        result = finalize_vent_result(VentResult(vs_turtle_vent=10, confidence=1.0))
        cross_validate(result, ExtractionHints(roof_area=3000))

        assert result.is_balanced is False
        assert result.validation_notes[0].startswith("Exhaust ventilation (500 sq in NFA)")
        assert result.validation_notes[-1].startswith("No intake ventilation detected")


class TestAdequacy:
    def test_adequate(self) -> None:
        result = finalize_vent_result(VentResult(vs_ridge_vent=80))
        assessment = assess_ventilation_adequacy(result, 3000)
        assert assessment.is_adequate is True
        assert assessment.deficit == 0.0
        assert assessment.suggested_additions == {}

    def test_deficit_suggests_additions(self) -> None:
        result = finalize_vent_result(VentResult(vs_turtle_vent=10))
        assessment = assess_ventilation_adequacy(result, 3000)
        assert assessment.is_adequate is False
        assert assessment.deficit == pytest.approx(940)
        assert assessment.recommendation == "Ventilation deficit of 940 sq in NFA detected"
        assert assessment.suggested_additions == {"vs_ridge_vent": 53, "vs_turtle_vent": 19}


class TestVentExtractor:
    def test_extracts_with_hints(self, capability_returning) -> None:
        capability, _client = capability_returning(
            {"vsTurtleVent": 10, "confidence": 0.9}
        )
        result = VentExtractor(capability).extract("scope", roof_area_hint=3000)

        assert result.nfa == 500
        assert result.is_balanced is False
        assert any("may be insufficient" in note for note in result.validation_notes)
        assert any("No intake ventilation" in note for note in result.validation_notes)

    def test_extract_counts_skips_cross_checks(self, capability_returning) -> None:
        capability, _client = capability_returning(
            {"vsTurtleVent": 10, "confidence": 0.9}
        )
        result = VentExtractor(capability).extract_counts("scope")

        assert result.nfa == 500
        assert result.total_exhaust == 10
        assert result.validation_notes == []

    def test_fallback_result(self, capability_returning) -> None:
        capability, _client = capability_returning("sorry")
        result = VentExtractor(capability).extract("scope")

        assert result.confidence == 0.5
        assert result.total_exhaust == 0
        assert result.validation_notes == ["Vent extraction response could not be parsed"]
