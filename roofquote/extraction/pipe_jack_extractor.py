"""Pipe jack (pipe flashing) extraction and plausibility checks.

Counts come from the model; totals and confidence penalties are computed
here. Each plausibility rule is a separate function that appends a note and
scales confidence, so penalties from independent rules compound.
"""

import math
from dataclasses import dataclass
from typing import Any

from roofquote.extraction.base import SchemaExtractor
from roofquote.extraction.coercion import (
    read_confidence,
    read_count,
    read_list,
    read_str,
    read_str_list,
)
from roofquote.extraction.json_parser import Fallback
from roofquote.extraction.models import (
    PIPE_JACK_COUNTERS,
    ExtractionHints,
    OtherPipeJack,
    PipeJackResult,
)
from roofquote.logging.logger import Log

DEFAULT_CONFIDENCE = 0.5
BELOW_RANGE_PENALTY = 0.8
ABOVE_RANGE_PENALTY = 0.9
STRUCTURE_DEFICIT_PENALTY = 0.85
MIN_JACKS_PER_STRUCTURE = 2

# model field name -> PipeJackResult attribute
_RESPONSE_FIELDS = {
    "pf3n1": "pf3n1",
    "pf14": "pf14",
    "pf14_4": "pf14_4",
    "pf14_5": "pf14_5",
    "pf14_6": "pf14_6",
    "pf14_8": "pf14_8",
    "pfSplitBoot": "pf_split_boot",
    "pfLead": "pf_lead",
    "pfGooseNeckSmall": "pf_goose_neck_small",
    "pfGooseNeckLarge": "pf_goose_neck_large",
}


@dataclass(frozen=True)
class ExpectedRange:
    minimum: int
    maximum: int


def expected_pipe_jack_range(roof_area: float) -> ExpectedRange:
    """Plausible pipe jack count for a roof of ``roof_area`` square feet."""
    return ExpectedRange(
        minimum=max(2, math.floor(roof_area / 1000)),
        maximum=max(8, math.ceil(roof_area / 300)),
    )


def total_pipe_jacks(result: PipeJackResult) -> int:
    return sum(getattr(result, name) for name in PIPE_JACK_COUNTERS) + sum(
        item.quantity for item in result.pf_other
    )


def apply_below_range_penalty(result: PipeJackResult, expected: ExpectedRange, roof_area: float) -> None:
    result.validation_notes.append(
        f"Total pipe jacks ({result.total_count}) is below expected minimum "
        f"({expected.minimum}) for {roof_area:g} sq ft roof"
    )
    result.confidence *= BELOW_RANGE_PENALTY


def apply_above_range_penalty(result: PipeJackResult, expected: ExpectedRange, roof_area: float) -> None:
    result.validation_notes.append(
        f"Total pipe jacks ({result.total_count}) exceeds expected maximum "
        f"({expected.maximum}) for {roof_area:g} sq ft roof"
    )
    result.confidence *= ABOVE_RANGE_PENALTY


def check_roof_area(result: PipeJackResult, roof_area: float | None) -> None:
    if not roof_area:
        return
    expected = expected_pipe_jack_range(roof_area)
    if result.total_count < expected.minimum:
        apply_below_range_penalty(result, expected, roof_area)
    elif result.total_count > expected.maximum:
        apply_above_range_penalty(result, expected, roof_area)


def check_structure_count(result: PipeJackResult, structure_count: int | None) -> None:
    """Every detected building needs at least two penetrations."""
    if not structure_count:
        return
    if result.total_count < structure_count * MIN_JACKS_PER_STRUCTURE:
        result.validation_notes.append(
            f"Warning: {result.total_count} pipe jacks for {structure_count} "
            "structures may be low"
        )
        result.confidence *= STRUCTURE_DEFICIT_PENALTY


def cross_validate(result: PipeJackResult, hints: ExtractionHints) -> PipeJackResult:
    """Apply the roof-area rule, then the structure rule."""
    check_roof_area(result, hints.roof_area)
    check_structure_count(result, hints.structure_count)
    return result


def build_pipe_jack_result(data: dict[str, Any]) -> PipeJackResult:
    """Fully populated result from a parsed response; total is recomputed."""
    result = PipeJackResult(
        confidence=read_confidence(data, DEFAULT_CONFIDENCE),
        validation_notes=read_str_list(data, "validationNotes"),
    )
    for response_key, attr in _RESPONSE_FIELDS.items():
        setattr(result, attr, read_count(data, response_key))
    result.pf_other = [
        OtherPipeJack(
            description=read_str(item, "description", "Unspecified pipe flashing"),
            quantity=read_count(item, "quantity"),
        )
        for item in read_list(data, "pfOther")
        if isinstance(item, dict)
    ]
    result.total_count = total_pipe_jacks(result)
    return result


class PipeJackExtractor(SchemaExtractor):
    """Extracts pipe jack counts from scope text."""

    PROMPT_NAME = "pipe_jacks"

    def extract(self, text: str, roof_area_hint: float | None = None) -> PipeJackResult:
        parsed = self._request(
            "Extract ALL pipe jack/flashing quantities from this insurance document "
            f"text. Be thorough and accurate:\n\n{text}"
        )
        if isinstance(parsed, Fallback):
            result = PipeJackResult(
                confidence=DEFAULT_CONFIDENCE,
                validation_notes=["Pipe jack extraction response could not be parsed"],
            )
        else:
            result = build_pipe_jack_result(parsed.value)

        check_roof_area(result, roof_area_hint)
        Log.info(
            f"Pipe jacks extracted: total={result.total_count} "
            f"confidence={result.confidence:.2f}"
        )
        return result
