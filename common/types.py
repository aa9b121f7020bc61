"""Shared data type definitions (UploadResult, DownloadResult)."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of a finalized upload stream.
    """
    id: str
    hash: str


@dataclass(frozen=True)
class DownloadResult:
    """
    Outcome of downloading an artifact to a local file.
    """
    id: str
    path: Path
    size: int
    hash: str
