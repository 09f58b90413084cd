from typing import Any

import psycopg
from psycopg.rows import dict_row

from roofquote.database.connection import get_connection
from roofquote.database.models import DocumentJobRecord


class DocumentJobRepository:
    """Database operations for the document_jobs queue table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> DocumentJobRecord | None:
        """Claim the oldest pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, document_id, organization_id, status, attempts
                FROM document_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            return None

        conn.execute(
            """
            UPDATE document_jobs
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        return DocumentJobRecord(
            id=row["id"],
            document_id=str(row["document_id"]),
            organization_id=str(row["organization_id"]),
            status="processing",
            attempts=row["attempts"],
        )

    def mark_done(self, job_id: int) -> None:
        self._set_status(job_id, "done", None)

    def mark_failed(self, job_id: int, error: str) -> None:
        self._set_status(job_id, "failed", error)

    def release_for_retry(self, job_id: int) -> None:
        """Count the attempt and put the job back in the queue."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET attempts = attempts + 1, status = 'pending',
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def _set_status(self, job_id: int, status: str, error: str | None) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE document_jobs
                SET status = %s, error_message = %s, locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (status, error, job_id),
            )
            conn.commit()
