from typing import Any

from psycopg.rows import dict_row

from roofquote.database.connection import get_connection
from roofquote.database.models import JobRecord
from roofquote.pricing.models import LineItem


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


class JobRepository:
    """Database operations for roofing jobs and their line items."""

    def find_by_id(self, job_id: str, organization_id: str) -> JobRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, organization_id, job_number, customer_name,
                           total_rcv, total_acv, deductible, insurance_company,
                           policy_number, claim_number, estimated_profit, profit_margin
                    FROM jobs
                    WHERE id = %s AND organization_id = %s
                    """,
                    (job_id, organization_id),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return JobRecord(
            id=str(row["id"]),
            organization_id=str(row["organization_id"]),
            job_number=row["job_number"],
            customer_name=row["customer_name"],
            total_rcv=_optional_float(row["total_rcv"]),
            total_acv=_optional_float(row["total_acv"]),
            deductible=_optional_float(row["deductible"]),
            insurance_company=row["insurance_company"],
            policy_number=row["policy_number"],
            claim_number=row["claim_number"],
            estimated_profit=_optional_float(row["estimated_profit"]),
            profit_margin=_optional_float(row["profit_margin"]),
        )

    def list_line_items(self, job_id: str) -> list[LineItem]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, category, subcategory, description, quantity, unit, rcv
                    FROM line_items
                    WHERE job_id = %s
                    ORDER BY created_at, id
                    """,
                    (job_id,),
                )
                rows = cur.fetchall()

        return [
            LineItem(
                id=str(row["id"]),
                category=row["category"],
                subcategory=row["subcategory"],
                description=row["description"],
                quantity=float(row["quantity"] or 0),
                unit=row["unit"],
                rcv=_optional_float(row["rcv"]),
            )
            for row in rows
        ]

    def update_profitability(self, job_id: str, estimated_profit: float, profit_margin: float) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE jobs
                SET estimated_profit = %s, profit_margin = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (estimated_profit, profit_margin, job_id),
            )
            conn.commit()
