from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from roofquote.database.connection import get_connection
from roofquote.database.models import DocumentRecord
from roofquote.database.repositories.analysis_repository import delete_document_results
from roofquote.processor.exceptions import DocumentNotFoundError

_DOCUMENT_COLUMNS = """
    id, organization_id, job_id, name, s3_key, mime_type, file_size,
    processing_status, type, sub_type, ocr_text, ocr_provider, ocr_confidence,
    extracted_data, validation_errors, processing_error, processed_at,
    created_at, updated_at
"""

DEFAULT_STALE_AFTER_SECONDS = 1800

# Takes the stale window in seconds as its one parameter.
_NOT_HELD_BY_LIVE_RUN = """(
    processing_status <> 'processing'
    OR updated_at < NOW() - %s * INTERVAL '1 second'
)"""


def _to_record(row: dict[str, Any]) -> DocumentRecord:
    confidence = row["ocr_confidence"]
    return DocumentRecord(
        id=str(row["id"]),
        organization_id=str(row["organization_id"]),
        job_id=str(row["job_id"]),
        name=row["name"],
        s3_key=row["s3_key"],
        mime_type=row["mime_type"],
        file_size=row["file_size"],
        processing_status=row["processing_status"],
        type=row["type"],
        sub_type=row["sub_type"],
        ocr_text=row["ocr_text"],
        ocr_provider=row["ocr_provider"],
        ocr_confidence=float(confidence) if confidence is not None else None,
        extracted_data=row["extracted_data"],
        validation_errors=row["validation_errors"],
        processing_error=row["processing_error"],
        processed_at=row["processed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class DocumentRepository:
    """Database operations for the documents table.

    Reads and state transitions that start a run are scoped by organization;
    the per-step writes that follow address the already-claimed row by id.
    A ``processing`` row untouched for ``stale_after_seconds`` counts as
    abandoned and can be claimed or reset again.
    """

    def __init__(self, stale_after_seconds: int = DEFAULT_STALE_AFTER_SECONDS) -> None:
        self._stale_after_seconds = stale_after_seconds

    def find_by_id(self, document_id: str, organization_id: str) -> DocumentRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_DOCUMENT_COLUMNS}
                    FROM documents
                    WHERE id = %s AND organization_id = %s
                    """,
                    (document_id, organization_id),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)

    def claim_for_processing(self, document_id: str, organization_id: str) -> bool:
        """Move the document to ``processing`` unless a live run already holds it.

        Returns:
            True if this caller now owns the run, False if it was already processing.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET processing_status = 'processing', updated_at = NOW()
                    WHERE id = %s
                      AND organization_id = %s
                      AND {_NOT_HELD_BY_LIVE_RUN}
                    """,
                    (document_id, organization_id, self._stale_after_seconds),
                )
                claimed = cur.rowcount == 1
            conn.commit()
        return claimed

    def reset_for_reprocess(self, document_id: str, organization_id: str) -> bool:
        """Return a settled document to ``pending`` and clear prior results.

        Analyses, insurance line items and aerial reports written by earlier
        runs are deleted in the same transaction, so a document whose type
        changes on reprocessing leaves nothing of its old type behind.

        Returns:
            False if a live run holds the document (or it is absent), True otherwise.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE documents
                    SET processing_status = 'pending',
                        processing_error = NULL,
                        extracted_data = NULL,
                        validation_errors = NULL,
                        processed_at = NULL,
                        updated_at = NOW()
                    WHERE id = %s
                      AND organization_id = %s
                      AND {_NOT_HELD_BY_LIVE_RUN}
                    RETURNING job_id
                    """,
                    (document_id, organization_id, self._stale_after_seconds),
                )
                row = cur.fetchone()
                if row is not None:
                    delete_document_results(cur, str(row[0]), document_id)
            conn.commit()
        return row is not None

    def update_ocr_result(
        self, document_id: str, text: str, provider: str, confidence: float
    ) -> None:
        self._update(
            document_id,
            "ocr_text = %s, ocr_provider = %s, ocr_confidence = %s",
            (text, provider, confidence),
        )

    def update_classification(
        self, document_id: str, document_type: str, sub_type: str | None
    ) -> None:
        self._update(document_id, "type = %s, sub_type = %s", (document_type, sub_type))

    def mark_completed(
        self,
        document_id: str,
        extracted_data: dict[str, Any],
        validation_errors: dict[str, Any] | None,
    ) -> None:
        """Store the final payload. ``validation_errors`` is only set when there are errors."""
        self._update(
            document_id,
            """
            processing_status = 'completed',
            processed_at = NOW(),
            extracted_data = %s,
            validation_errors = %s
            """,
            (
                Jsonb(extracted_data),
                Jsonb(validation_errors) if validation_errors is not None else None,
            ),
        )

    def mark_failed(self, document_id: str, error: str) -> None:
        self._update(
            document_id,
            "processing_status = 'failed', processing_error = %s",
            (error,),
        )

    def _update(self, document_id: str, assignments: str, params: tuple[Any, ...]) -> None:
        """Apply ``assignments`` to one document.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"UPDATE documents SET {assignments}, updated_at = NOW() WHERE id = %s",
                    (*params, document_id),
                )
                if cur.rowcount == 0:
                    raise DocumentNotFoundError(f"Document {document_id} not found")
            conn.commit()
