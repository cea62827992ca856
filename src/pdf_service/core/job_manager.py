"""Tracking of background extraction tasks, one per document."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from .exceptions import ExtractionInProgressError

logger = logging.getLogger(__name__)


class Job:
    """A running extraction task for one document."""

    def __init__(self, document_id: str, job_type: str, task: "asyncio.Task[Any]"):
        self.document_id = document_id
        self.job_type = job_type
        self.task = task
        self.created_at = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert job to dictionary."""
        return {
            "document_id": self.document_id,
            "job_type": self.job_type,
            "created_at": self.created_at.isoformat(),
            "done": self.task.done(),
        }


class JobManager:
    """Registry of in-flight extraction tasks keyed by document id.

    At most one task exists per document. Starting a second one while the
    first is still running raises ``ExtractionInProgressError``; tasks remove
    themselves from the registry when they finish.
    """

    def __init__(self):
        self.jobs: Dict[str, Job] = {}

    def start_job(
        self,
        document_id: str,
        job_type: str,
        work: Callable[[], Awaitable[Any]],
    ) -> Job:
        """Schedule ``work()`` as the task for ``document_id``.

        Must be called from within the running event loop.
        """
        if self.is_running(document_id):
            logger.warning(f"Rejected {job_type} for document {document_id}: extraction already running")
            raise ExtractionInProgressError(
                "Text extraction is already in progress for this document"
            )

        task = asyncio.get_running_loop().create_task(work())
        job = Job(document_id, job_type, task)
        self.jobs[document_id] = job
        task.add_done_callback(lambda t, doc_id=document_id: self._on_done(doc_id, t))
        logger.info(f"Started {job_type} job for document {document_id}")
        return job

    def _on_done(self, document_id: str, task: "asyncio.Task[Any]"):
        job = self.jobs.get(document_id)
        if job is not None and job.task is task:
            del self.jobs[document_id]

        if task.cancelled():
            logger.info(f"Job for document {document_id} was cancelled")
        elif task.exception() is not None:
            logger.error(f"Job for document {document_id} crashed: {task.exception()!r}")

    def get_job(self, document_id: str) -> Optional[Job]:
        """Get job by document ID."""
        return self.jobs.get(document_id)

    def is_running(self, document_id: str) -> bool:
        job = self.jobs.get(document_id)
        return job is not None and not job.task.done()

    @property
    def active_count(self) -> int:
        return sum(1 for job in self.jobs.values() if not job.task.done())

    def cancel(self, document_id: str) -> bool:
        """Cancel the job for a document, if one is running."""
        job = self.jobs.pop(document_id, None)
        if job is None or job.task.done():
            return False
        job.task.cancel()
        logger.info(f"Cancelled job for document {document_id}")
        return True

    async def wait(self, document_id: str) -> None:
        """Wait until the job for ``document_id`` (if any) has finished."""
        job = self.jobs.get(document_id)
        if job is not None:
            await asyncio.gather(job.task, return_exceptions=True)

    async def shutdown(self):
        """Cancel every running job and wait for them to unwind."""
        tasks = [job.task for job in self.jobs.values() if not job.task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Cancelled {len(tasks)} running jobs on shutdown")
        self.jobs.clear()
