"""Command handler functions for CLI operations."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from common.logging_config import get_logger
from common.types import UploadResult
from cli.config import Config
from cli.constants import DEFAULT_CONFIG_PATH_PARTS, GREEN, RED, RESET
from cli.models import CancelCommand, DownloadCommand, JobsCommand, UploadCommand
from cli.utils import extension_of, format_file_size, format_progress
from transfer.api_client import KekUploadAPI
from transfer.chunked_downloader import ChunkedDownloader
from transfer.chunked_uploader import ChunkedUploader
from transfer.exceptions import KekUploadError, UploadCancelledError
from transfer.file_downloader import FileDownloader
from transfer.file_uploader import FileUploader
from transfer.sources import FileSource
from transfer.transfer_queue import TransferQueue, UploadJob

logger = get_logger(__name__)


@dataclass
class JobStatus:
    """What the REPL knows about one submitted upload."""

    label: str
    size: int
    progress: float = 0.0


class TransferSession:
    """Owns the API client, the upload queue and per-job display state."""

    def __init__(self, config: Config, api: Optional[KekUploadAPI] = None):
        """
        Initialize transfer session.

        Args:
            config: Configuration instance
            api: Optional API client for dependency injection (testing)
        """
        self.config = config
        self.api = api or KekUploadAPI(config.get_base_url(), timeout=config.get_timeout())
        sizes = config.get_transfer_sizes()
        self.uploader = FileUploader(
            ChunkedUploader(self.api, config.get_retry_policy()),
            read_size=sizes['read_size'],
            chunk_size=sizes['chunk_size'],
        )
        self.queue = TransferQueue(self.uploader)
        self.download_chunk_size = sizes['download_chunk_size']
        self.jobs: Dict[int, JobStatus] = {}

    def submit(self, path: Path) -> int:
        """
        Queue one file for upload.

        Args:
            path: File to upload

        Returns:
            Job id
        """
        source = FileSource(path)
        status = JobStatus(label=path.name, size=source.size)
        job = UploadJob(
            source=source,
            extension=extension_of(path),
            name=path.stem or None,
            on_progress=lambda fraction: setattr(status, 'progress', fraction),
            on_complete=lambda result: self._on_complete(status, result),
            on_error=lambda error: self._on_error(status, error),
        )
        job_id = self.queue.add_job(job)
        # The worker cannot start the job before this method returns.
        job.on_finally = lambda: self.forget(job_id)
        self.jobs[job_id] = status
        return job_id

    def forget(self, job_id: int) -> None:
        """Drop the display state of a finished or cancelled job."""
        self.jobs.pop(job_id, None)

    def _on_complete(self, status: JobStatus, result: UploadResult) -> None:
        status.progress = 1.0
        print(f"{GREEN}Uploaded{RESET}: {status.label} (ID: {result.id}, SHA-1: {result.hash})")

    def _on_error(self, status: JobStatus, error: BaseException) -> None:
        if isinstance(error, UploadCancelledError):
            print(f"Cancelled: {status.label}")
        else:
            print(f"{RED}Upload failed{RESET}: {status.label}: {error}")

    async def close(self) -> None:
        await self.queue.close()
        await self.api.close()


_session: Optional[TransferSession] = None


def get_session() -> TransferSession:
    """
    Get or create global TransferSession instance.

    Returns:
        TransferSession instance
    """
    global _session
    if _session is None:
        logger.debug("Creating new TransferSession instance")
        config = Config(Path.home().joinpath(*DEFAULT_CONFIG_PATH_PARTS))
        _session = TransferSession(config)
    return _session


def handle_upload(cmd: UploadCommand, session: Optional[TransferSession] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        session: Optional TransferSession for dependency injection (testing)

    Returns:
        One line per file with its job id or the reason it was skipped
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} file(s)")
    if session is None:
        session = get_session()

    results = []
    for file_path in cmd.file_list:
        path = Path(file_path).expanduser()
        if not path.exists():
            results.append(f"Error: File not found: {file_path}")
            continue
        if not path.is_file():
            results.append(f"Error: Not a file: {file_path}")
            continue

        job_id = session.submit(path)
        results.append(
            f"Queued job {job_id}: {path.name} ({format_file_size(session.jobs[job_id].size)})"
        )

    return '\n'.join(results)


async def handle_download(cmd: DownloadCommand, session: Optional[TransferSession] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with file_id and optional output_path
        session: Optional TransferSession for dependency injection (testing)

    Returns:
        Success or error message with download details
    """
    logger.info(f"Executing download command: id={cmd.file_id} output_path={cmd.output_path}")
    if session is None:
        session = get_session()

    destination = Path(cmd.output_path).expanduser() if cmd.output_path else Path(cmd.file_id)
    if destination.is_dir():
        destination = destination / cmd.file_id

    downloader = FileDownloader(ChunkedDownloader(session.api), chunk_size=session.download_chunk_size)
    try:
        result = await downloader.download_file(cmd.file_id, destination)
    except KekUploadError as e:
        return f"Error downloading {cmd.file_id}: {e}"
    except OSError as e:
        return f"Error writing file: {e}"

    return (
        f"Downloaded: {cmd.file_id} ({format_file_size(result.size)})\n"
        f"SHA-1: {result.hash}\n"
        f"Saved to: {result.path.absolute()}"
    )


async def handle_cancel(cmd: CancelCommand, session: Optional[TransferSession] = None) -> str:
    """
    Handle 'cancel' command.

    Args:
        cmd: CancelCommand with job_id
        session: Optional TransferSession for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing cancel command: job={cmd.job_id}")
    if session is None:
        session = get_session()

    try:
        await session.queue.cancel_job(cmd.job_id)
    except KekUploadError as e:
        return f"Error: {e}"

    session.forget(cmd.job_id)
    return f"Cancelled job {cmd.job_id}"


def handle_jobs(cmd: JobsCommand, session: Optional[TransferSession] = None) -> str:
    """
    Handle 'jobs' command.

    Args:
        cmd: JobsCommand
        session: Optional TransferSession for dependency injection (testing)

    Returns:
        Formatted queue status
    """
    if session is None:
        session = get_session()

    active = session.queue.active_job
    pending = session.queue.pending_jobs
    if active is None and not pending:
        return "No upload jobs running."

    output = []
    if active is not None:
        status = session.jobs[active]
        output.append(f"Running: [{active}] {status.label} {format_progress(status.progress)}")
    if pending:
        output.append(f"Queued ({len(pending)}):")
        for job_id in pending:
            status = session.jobs[job_id]
            output.append(f"  - [{job_id}] {status.label} ({format_file_size(status.size)})")

    return '\n'.join(output)
