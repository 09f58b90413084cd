from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from roofquote.database.connection import get_connection
from roofquote.database.models import EstimateRecord

_ESTIMATE_COLUMNS = """
    id, job_id, type, status, material_cost, labor_cost, overhead, profit,
    total_price, supplier_used, line_items, price_date, sent_at, created_at
"""


def _to_record(row: dict[str, Any]) -> EstimateRecord:
    return EstimateRecord(
        id=str(row["id"]),
        job_id=str(row["job_id"]),
        type=row["type"],
        status=row["status"],
        material_cost=float(row["material_cost"]),
        labor_cost=float(row["labor_cost"]),
        overhead=float(row["overhead"]),
        profit=float(row["profit"]),
        total_price=float(row["total_price"]),
        supplier_used=row["supplier_used"],
        line_items=row["line_items"] or [],
        price_date=row["price_date"],
        sent_at=row["sent_at"],
        created_at=row["created_at"],
    )


class EstimateRepository:
    """Database operations for the estimates table."""

    def create(
        self,
        *,
        job_id: str,
        estimate_type: str,
        material_cost: float,
        labor_cost: float,
        overhead: float,
        profit: float,
        total_price: float,
        supplier_used: str,
        line_items: list[dict[str, Any]],
    ) -> EstimateRecord:
        """Insert a ``draft`` estimate priced as of now."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO estimates (
                        job_id, type, status, material_cost, labor_cost, overhead,
                        profit, total_price, supplier_used, line_items, price_date
                    )
                    VALUES (%s, %s, 'draft', %s, %s, %s, %s, %s, %s, %s, NOW())
                    RETURNING {_ESTIMATE_COLUMNS}
                    """,
                    (
                        job_id,
                        estimate_type,
                        material_cost,
                        labor_cost,
                        overhead,
                        profit,
                        total_price,
                        supplier_used,
                        Jsonb(line_items),
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("Estimate insert returned no row")
        return _to_record(row)

    def find_by_id(self, estimate_id: str, organization_id: str) -> EstimateRecord | None:
        """Estimate lookup scoped through its job's organization."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT e.id, e.job_id, e.type, e.status, e.material_cost,
                           e.labor_cost, e.overhead, e.profit, e.total_price,
                           e.supplier_used, e.line_items, e.price_date, e.sent_at,
                           e.created_at
                    FROM estimates e
                    JOIN jobs j ON j.id = e.job_id
                    WHERE e.id = %s AND j.organization_id = %s
                    """,
                    (estimate_id, organization_id),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)

    def update_status(self, estimate_id: str, status: str) -> EstimateRecord:
        """Set ``status``; moving to ``sent`` stamps ``sent_at``."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE estimates
                    SET status = %s,
                        sent_at = CASE WHEN %s = 'sent' THEN NOW() ELSE sent_at END,
                        updated_at = NOW()
                    WHERE id = %s
                    RETURNING {_ESTIMATE_COLUMNS}
                    """,
                    (status, status, estimate_id),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError(f"Estimate {estimate_id} disappeared during update")
        return _to_record(row)
