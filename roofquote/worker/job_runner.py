from roofquote.config.settings import Settings
from roofquote.database.models import DocumentJobRecord
from roofquote.database.repositories.document_job_repository import DocumentJobRepository
from roofquote.logging.logger import Log
from roofquote.processor.processor import DocumentProcessor


class JobRunner:
    """Run one queued document, record the outcome and apply retry logic."""

    def __init__(
        self,
        processor: DocumentProcessor,
        job_repo: DocumentJobRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._settings = settings

    def run(self, job: DocumentJobRecord) -> None:
        """Document-level failures end the job; escaped exceptions are retried."""
        Log.info(
            f"Running job {job.id} (attempt {job.attempts + 1})",
            document_id=job.document_id,
            organization_id=job.organization_id,
        )
        try:
            result = self._processor.process_document(job.document_id, job.organization_id)
            if result.success:
                self._job_repo.mark_done(job.id)
                Log.info(f"Job {job.id} completed successfully")
            else:
                self._job_repo.mark_failed(job.id, result.error or "Unknown error")
                Log.warning(f"Job {job.id} finished with a failed document: {result.error}")
        except Exception as exc:
            self._handle_failure(job, exc)

    def _handle_failure(self, job: DocumentJobRecord, exc: Exception) -> None:
        """Count the attempt; mark failed at the limit, otherwise back to pending."""
        Log.error(f"Job {job.id} raised: {exc}")
        if job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, str(exc))
            Log.error(f"Job {job.id} permanently failed after {job.attempts + 1} attempts")
        else:
            self._job_repo.release_for_retry(job.id)
            Log.warning(f"Job {job.id} will be retried (attempt {job.attempts + 2})")
