"""FIFO job queue that runs file uploads one at a time."""

import asyncio
import inspect
import itertools
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional

from common.logging_config import get_logger
from transfer.exceptions import JobNotFoundError, KekUploadError, UploadCancelledError
from transfer.file_uploader import FileUploader, ProgressCallback
from transfer.sources import ByteSource

logger = get_logger(__name__)


@dataclass
class UploadJob:
    """
    A queued upload and its callbacks.

    Callbacks may be plain functions or coroutine functions. on_complete gets
    the UploadResult, on_error gets the exception (UploadCancelledError for a
    cancelled job), on_finally runs once after either of them.
    """
    source: ByteSource
    extension: str
    name: Optional[str] = None
    on_start: Optional[Callable[[], Any]] = None
    on_progress: Optional[ProgressCallback] = None
    on_complete: Optional[Callable[[Any], Any]] = None
    on_error: Optional[Callable[[BaseException], Any]] = None
    on_finally: Optional[Callable[[], Any]] = None


class TransferQueue:
    """
    Serializes upload jobs through a single FileUploader.

    Jobs run strictly in submission order on one worker task. The worker is
    started by add_job and exits when the queue is drained.
    """

    def __init__(self, uploader: FileUploader):
        """
        Initialize transfer queue.

        Args:
            uploader: File uploader owned exclusively by this queue
        """
        self.uploader = uploader
        self._queue: Deque[int] = deque()
        self._jobs: Dict[int, UploadJob] = {}
        self._ids = itertools.count()
        self._worker: Optional[asyncio.Task] = None
        self.active_job: Optional[int] = None

    @property
    def pending_jobs(self) -> List[int]:
        """Ids of queued jobs in the order they will run."""
        return list(self._queue)

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def add_job(self, job: UploadJob) -> int:
        """
        Queue a job and make sure the worker is running.

        Must be called from inside a running event loop.

        Args:
            job: Job to run

        Returns:
            Numeric job id, usable with cancel_job
        """
        job_id = next(self._ids)
        self._jobs[job_id] = job
        self._queue.append(job_id)
        logger.info(f"Queued job {job_id} [ext={job.extension}, name={job.name}, source={job.source!r}]")

        if not self.is_running:
            self._worker = asyncio.get_running_loop().create_task(self._work())
        return job_id

    async def cancel_job(self, job_id: int) -> None:
        """
        Cancel an active or queued job.

        An active job is aborted cooperatively; this returns once the abort has
        completed. A queued job is dropped without running any of its callbacks.

        Args:
            job_id: Id returned by add_job

        Raises:
            JobNotFoundError: If the job is neither active nor queued
            NotUploadingError: If the active job is not in its upload phase
        """
        if self.active_job is not None and job_id == self.active_job:
            logger.info(f"Cancelling active job {job_id}")
            await self.uploader.cancel()
            return

        if job_id in self._jobs:
            del self._jobs[job_id]
            self._queue.remove(job_id)
            logger.info(f"Removed queued job {job_id}")
            return

        raise JobNotFoundError(f"Job {job_id} not found")

    async def join(self) -> None:
        """Wait until every queued job has run."""
        while self.is_running:
            await asyncio.shield(self._worker)

    async def close(self) -> None:
        """
        Stop the worker task; queued jobs are discarded.

        An active job is interrupted: its stream is removed, on_error gets an
        UploadCancelledError and on_finally still runs.
        """
        self._queue.clear()
        self._jobs.clear()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None

    async def _work(self) -> None:
        while self._queue:
            job_id = self._queue.popleft()
            job = self._jobs.pop(job_id)
            self.active_job = job_id
            try:
                await self._run_job(job_id, job)
            finally:
                self.active_job = None
        logger.debug("Transfer queue drained")

    async def _run_job(self, job_id: int, job: UploadJob) -> None:
        logger.info(f"Starting job {job_id}")
        await self._notify(job_id, job.on_start)
        try:
            await self.uploader.begin(job.extension, job.name)
            await self.uploader.upload_file(job.source, self._guard_progress(job_id, job.on_progress))
            result = await self.uploader.finish()
        except asyncio.CancelledError:
            logger.warning(f"Job {job_id} interrupted by queue shutdown")
            await self._discard_stream(job_id)
            await self._notify(job_id, job.on_error, UploadCancelledError("Transfer queue closed"))
            raise
        except Exception as e:
            logger.warning(f"Job {job_id} failed: {type(e).__name__}: {e}")
            await self._notify(job_id, job.on_error, e)
        else:
            logger.info(f"Job {job_id} completed [id={result.id}, hash={result.hash}]")
            await self._notify(job_id, job.on_complete, result)
        finally:
            await self._notify(job_id, job.on_finally)

    async def _discard_stream(self, job_id: int) -> None:
        try:
            await self.uploader.destroy()
        except KekUploadError as e:
            logger.warning(f"Could not remove stream of job {job_id}: {e}")

    def _guard_progress(self, job_id: int, callback: Optional[ProgressCallback]) -> Optional[ProgressCallback]:
        if callback is None:
            return None

        def on_progress(fraction: float) -> None:
            try:
                callback(fraction)
            except Exception as e:
                logger.error(f"Progress callback of job {job_id} failed: {e}", exc_info=True)

        return on_progress

    async def _notify(self, job_id: int, callback: Optional[Callable[..., Any]], *args) -> None:
        if callback is None:
            return
        try:
            result = callback(*args)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Callback {getattr(callback, '__name__', callback)!r} of job {job_id} failed: {e}", exc_info=True)
