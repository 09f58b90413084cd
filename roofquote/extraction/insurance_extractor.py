from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Any

from roofquote.extraction.header_extractor import HeaderExtractor
from roofquote.extraction.materials_extractor import MaterialsExtractor
from roofquote.extraction.models import (
    AerialExtraction,
    ConfidenceScores,
    ExtractionHints,
    HeaderExtraction,
    InsuranceExtraction,
    MaterialsExtraction,
    PipeJackResult,
    RoofMeasurements,
    VentResult,
)
from roofquote.extraction.pipe_jack_extractor import PipeJackExtractor
from roofquote.extraction.pipe_jack_extractor import cross_validate as cross_validate_pipe_jacks
from roofquote.extraction.vent_extractor import VentExtractor
from roofquote.extraction.vent_extractor import cross_validate as cross_validate_vents
from roofquote.logging.logger import Log

SQUARE_FEET_PER_SQUARE = 100


def hints_from_aerial(aerial: AerialExtraction) -> ExtractionHints:
    return ExtractionHints(
        roof_area=aerial.total_area or None,
        ridge_length=aerial.ridge_length or None,
        structure_count=len(aerial.structures) or None,
    )


def complete_hints(
    hints: ExtractionHints | None, measurements: RoofMeasurements
) -> ExtractionHints:
    """Fill gaps in ``hints`` from the scope's own measurements.

    Scope area is reported in squares and converted to square feet.
    """
    hints = hints or ExtractionHints()
    scope_area = (
        measurements.total_area * SQUARE_FEET_PER_SQUARE if measurements.total_area else None
    )
    return ExtractionHints(
        roof_area=hints.roof_area or scope_area,
        ridge_length=hints.ridge_length or measurements.ridge,
        structure_count=hints.structure_count,
    )


def overall_confidence(header: float, pipe_jacks: float, ventilation: float, financial: float) -> float:
    return (header + pipe_jacks + ventilation + financial) / 4


class InsuranceExtractor:
    """Runs the four scope extractors concurrently and assembles the result.

    The join is all-or-nothing: the first failing extractor aborts the
    extraction and its exception propagates unchanged.
    """

    def __init__(
        self,
        *,
        header_extractor: HeaderExtractor,
        pipe_jack_extractor: PipeJackExtractor,
        vent_extractor: VentExtractor,
        materials_extractor: MaterialsExtractor,
        max_workers: int = 4,
    ) -> None:
        self._header_extractor = header_extractor
        self._pipe_jack_extractor = pipe_jack_extractor
        self._vent_extractor = vent_extractor
        self._materials_extractor = materials_extractor
        self._max_workers = max_workers

    def extract(self, text: str, hints: ExtractionHints | None = None) -> InsuranceExtraction:
        header, pipe_jacks, vents, materials = self._run_concurrently(text)

        hints = complete_hints(hints, header.measurements)
        pipe_jacks = cross_validate_pipe_jacks(pipe_jacks, hints)
        vents = cross_validate_vents(vents, hints)

        extraction = self._assemble(header, pipe_jacks, vents, materials)
        Log.info(
            f"Insurance extraction assembled: overall confidence "
            f"{extraction.confidence_scores.overall:.2f}, "
            f"{len(extraction.line_items)} line items"
        )
        return extraction

    def _run_concurrently(
        self, text: str
    ) -> tuple[HeaderExtraction, PipeJackResult, VentResult, MaterialsExtraction]:
        executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="insurance-extract"
        )
        try:
            futures: list[Future[Any]] = [
                executor.submit(self._header_extractor.extract, text),
                executor.submit(self._pipe_jack_extractor.extract, text),
                executor.submit(self._vent_extractor.extract_counts, text),
                executor.submit(self._materials_extractor.extract, text),
            ]
            done, _pending = wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future in done:
                    error = future.exception()
                    if error is not None:
                        raise error
            header, pipe_jacks, vents, materials = (future.result() for future in futures)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return header, pipe_jacks, vents, materials

    @staticmethod
    def _assemble(
        header: HeaderExtraction,
        pipe_jacks: PipeJackResult,
        vents: VentResult,
        materials: MaterialsExtraction,
    ) -> InsuranceExtraction:
        # the materials response carries one confidence for materials and financials
        financial_confidence = materials.confidence
        return InsuranceExtraction(
            header_data=header.data,
            roof_measurements=header.measurements,
            pipe_jacks=pipe_jacks,
            ventilation=vents,
            materials=materials.materials,
            financial_summary=materials.financial_summary,
            line_items=materials.line_items,
            confidence_scores=ConfidenceScores(
                header=header.confidence,
                pipe_jacks=pipe_jacks.confidence,
                ventilation=vents.confidence,
                materials=materials.confidence,
                financial=financial_confidence,
                overall=overall_confidence(
                    header.confidence,
                    pipe_jacks.confidence,
                    vents.confidence,
                    financial_confidence,
                ),
            ),
        )
