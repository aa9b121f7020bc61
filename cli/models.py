"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Queue files for upload."""

    file_list: tuple[str, ...]
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download an artifact by id."""

    file_id: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class CancelCommand:
    """Cancel a running or queued job."""

    job_id: int
    command: Literal["cancel"] = "cancel"


@dataclass(frozen=True)
class JobsCommand:
    """Show queue status."""

    command: Literal["jobs"] = "jobs"


CommandRequest = (
    UploadCommand
    | DownloadCommand
    | CancelCommand
    | JobsCommand
)
