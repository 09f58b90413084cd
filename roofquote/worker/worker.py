import time

from roofquote.config.settings import Settings
from roofquote.database.connection import get_connection
from roofquote.database.models import DocumentJobRecord
from roofquote.database.repositories.document_job_repository import DocumentJobRepository
from roofquote.logging.logger import Log
from roofquote.worker.job_runner import JobRunner


class Worker:
    """Poll loop over the document queue: claim, dispatch, sleep when idle."""

    def __init__(
        self,
        job_repo: DocumentJobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> None:
        """Poll until interrupted, or until ``max_jobs`` jobs have run."""
        Log.info("Worker started, polling for documents")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._try_claim_job()
                if job is None:
                    Log.debug("No documents queued, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._job_runner.run(job)
                jobs_done += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_claim_job(self) -> DocumentJobRecord | None:
        """Database errors while claiming are logged and retried on the next poll."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
