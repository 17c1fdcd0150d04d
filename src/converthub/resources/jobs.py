"""
Job status, download and cleanup operations.
"""

import threading
import time
from typing import Any, Dict, Optional

from ..config import get_logger
from ..exceptions import JobTimeoutError, WaitCancelledError
from ..models import ConversionJob, DownloadInfo
from ..transport import Transport

logger = get_logger("jobs")

DEFAULT_POLLING_INTERVAL = 2.0
DEFAULT_MAX_WAIT = 300.0


class JobsResource:
    """Tracks conversion jobs."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def get_status(self, job_id: str) -> ConversionJob:
        response = self._transport.execute("GET", f"jobs/{job_id}")
        return ConversionJob.from_response(response)

    def cancel(self, job_id: str) -> Dict[str, Any]:
        return self._transport.execute("DELETE", f"jobs/{job_id}")

    def get_download_url(self, job_id: str) -> DownloadInfo:
        response = self._transport.execute("GET", f"jobs/{job_id}/download")
        return DownloadInfo.from_response(response)

    def delete(self, job_id: str) -> Dict[str, Any]:
        """Delete the converted file from the server."""
        return self._transport.execute("DELETE", f"jobs/{job_id}/destroy")

    def wait_for_completion(
        self,
        job_id: str,
        polling_interval: float = DEFAULT_POLLING_INTERVAL,
        max_wait: float = DEFAULT_MAX_WAIT,
        cancel_event: Optional[threading.Event] = None,
    ) -> ConversionJob:
        """
        Poll a job until it completes or fails.

        A failed job is a normal outcome and is returned, not raised. The
        status is always fetched at least once, even if ``max_wait`` is
        shorter than ``polling_interval``.

        Args:
            job_id: Job to wait for
            polling_interval: Seconds between status fetches
            max_wait: Seconds to wait before giving up
            cancel_event: Optional event; setting it interrupts the wait

        Returns:
            The job in its terminal state (completed or failed)

        Raises:
            JobTimeoutError: If the job is still running after ``max_wait``
            WaitCancelledError: If ``cancel_event`` is set during the wait
            ApiError: If a status fetch fails

        Example:
            >>> job = client.jobs.wait_for_completion(job.job_id, max_wait=60)
            >>> if job.is_failed:
            ...     print(job.error_message)
        """
        start = time.monotonic()
        polls = 0

        while True:
            job = self.get_status(job_id)
            polls += 1

            if job.is_terminal:
                logger.info(
                    "Job %s finished with status %s after %d polls",
                    job_id,
                    job.status.value,
                    polls,
                )
                return job

            elapsed = time.monotonic() - start
            if elapsed > max_wait:
                logger.warning("Job %s still %s after %.1fs", job_id, job.status.value, elapsed)
                raise JobTimeoutError(job_id, elapsed)

            logger.debug("Job %s is %s, polling again in %ss", job_id, job.status.value, polling_interval)

            if cancel_event is None:
                time.sleep(polling_interval)
            elif cancel_event.wait(polling_interval):
                raise WaitCancelledError(job_id)
