from dataclasses import asdict
from typing import Any

from psycopg import Cursor
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from roofquote.database.connection import get_connection
from roofquote.extraction.models import (
    AerialExtraction,
    InsuranceExtraction,
    InsuranceLineItem,
    Slope,
    Structure,
)

INSURANCE_LINE_ITEM_SOURCE = "insurance"


def _float(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _to_aerial(row: dict[str, Any]) -> AerialExtraction:
    return AerialExtraction(
        provider=row["provider"],
        report_id=row["report_id"],
        total_area=_float(row["total_area"]),
        total_perimeter=_float(row["total_perimeter"]),
        ridge_length=_float(row["ridge_length"]),
        hip_length=_float(row["hip_length"]),
        valley_length=_float(row["valley_length"]),
        eave_length=_float(row["eave_length"]),
        rake_length=_float(row["rake_length"]),
        slopes=[Slope(**slope) for slope in row["slopes"] or []],
        structures=[Structure(**structure) for structure in row["structures"] or []],
        facet_count=row["facet_count"] or 0,
        roof_complexity=row["roof_complexity"],
    )


def _line_item_params(
    job_id: str, document_id: str, item: InsuranceLineItem
) -> tuple[Any, ...]:
    return (
        job_id,
        document_id,
        INSURANCE_LINE_ITEM_SOURCE,
        item.category,
        item.subcategory,
        item.description,
        item.quantity,
        item.unit,
        item.rcv,
        item.acv,
        item.depreciation,
    )


def delete_document_results(cur: Cursor[Any], job_id: str, document_id: str) -> None:
    """Remove what earlier runs of ``document_id`` wrote, inside the caller's transaction.

    The job roll-up is cleared only when this document's analysis fed it.
    """
    cur.execute(
        """
        UPDATE jobs
        SET total_rcv = NULL, total_acv = NULL, deductible = NULL,
            insurance_company = NULL, policy_number = NULL, claim_number = NULL,
            updated_at = NOW()
        WHERE id = %s
          AND EXISTS (SELECT 1 FROM insurance_analyses WHERE document_id = %s)
        """,
        (job_id, document_id),
    )
    cur.execute("DELETE FROM insurance_analyses WHERE document_id = %s", (document_id,))
    cur.execute(
        "DELETE FROM line_items WHERE document_id = %s AND source = %s",
        (document_id, INSURANCE_LINE_ITEM_SOURCE),
    )
    cur.execute("DELETE FROM aerial_reports WHERE document_id = %s", (document_id,))


class AnalysisRepository:
    """Persists extraction results: insurance analyses, line items and aerial reports.

    Saving replaces whatever an earlier run of the same document wrote, so a
    reprocessed document leaves the same rows behind as a first run.
    """

    def save_insurance_analysis(
        self, job_id: str, document_id: str, extraction: InsuranceExtraction
    ) -> None:
        """Store the analysis, roll financials up to the job and insert line items.

        All three writes share one transaction.
        """
        header = extraction.header_data
        summary = extraction.financial_summary
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM insurance_analyses WHERE document_id = %s", (document_id,))
                cur.execute(
                    """
                    INSERT INTO insurance_analyses (
                        job_id, document_id, analysis_type, header_data,
                        roof_measurements, pipe_jacks, ventilation, materials,
                        financial_summary, confidence_scores
                    )
                    VALUES (%s, %s, 'full', %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        job_id,
                        document_id,
                        Jsonb(asdict(header)),
                        Jsonb(asdict(extraction.roof_measurements)),
                        Jsonb(asdict(extraction.pipe_jacks)),
                        Jsonb(asdict(extraction.ventilation)),
                        Jsonb([asdict(material) for material in extraction.materials]),
                        Jsonb(asdict(summary)),
                        Jsonb(asdict(extraction.confidence_scores)),
                    ),
                )
                cur.execute(
                    """
                    UPDATE jobs
                    SET total_rcv = %s, total_acv = %s, deductible = %s,
                        insurance_company = %s, policy_number = %s, claim_number = %s,
                        updated_at = NOW()
                    WHERE id = %s
                    """,
                    (
                        summary.total_rcv,
                        summary.total_acv,
                        summary.deductible,
                        header.insurance_company,
                        header.policy_number,
                        header.claim_number,
                        job_id,
                    ),
                )
                cur.execute(
                    "DELETE FROM line_items WHERE document_id = %s AND source = %s",
                    (document_id, INSURANCE_LINE_ITEM_SOURCE),
                )
                if extraction.line_items:
                    cur.executemany(
                        """
                        INSERT INTO line_items (
                            job_id, document_id, source, category, subcategory,
                            description, quantity, unit, rcv, acv, depreciation
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        """,
                        [
                            _line_item_params(job_id, document_id, item)
                            for item in extraction.line_items
                        ],
                    )
            conn.commit()

    def save_aerial_report(
        self, job_id: str, document_id: str, extraction: AerialExtraction
    ) -> None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM aerial_reports WHERE document_id = %s", (document_id,))
                cur.execute(
                    """
                    INSERT INTO aerial_reports (
                        job_id, document_id, provider, report_id, total_area,
                        total_perimeter, ridge_length, hip_length, valley_length,
                        eave_length, rake_length, slopes, structures, facet_count,
                        roof_complexity
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        job_id,
                        document_id,
                        extraction.provider,
                        extraction.report_id,
                        extraction.total_area,
                        extraction.total_perimeter,
                        extraction.ridge_length,
                        extraction.hip_length,
                        extraction.valley_length,
                        extraction.eave_length,
                        extraction.rake_length,
                        Jsonb([asdict(slope) for slope in extraction.slopes]),
                        Jsonb([asdict(structure) for structure in extraction.structures]),
                        extraction.facet_count,
                        extraction.roof_complexity,
                    ),
                )
            conn.commit()

    def find_latest_aerial_report(self, job_id: str) -> AerialExtraction | None:
        """Most recent aerial report for the job, used to cross-check scopes."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT provider, report_id, total_area, total_perimeter,
                           ridge_length, hip_length, valley_length, eave_length,
                           rake_length, slopes, structures, facet_count, roof_complexity
                    FROM aerial_reports
                    WHERE job_id = %s
                    ORDER BY created_at DESC
                    LIMIT 1
                    """,
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_aerial(row)
