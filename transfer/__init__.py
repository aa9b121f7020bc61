"""Chunked transfer engine for the KekUpload API."""

from transfer.api_client import KekUploadAPI
from transfer.cancellation import CancellationToken
from transfer.chunked_downloader import ChunkedDownloader
from transfer.chunked_uploader import ChunkedUploader
from transfer.file_downloader import FileDownloader
from transfer.file_uploader import FileUploader
from transfer.retry import RetryPolicy
from transfer.sources import ByteSource, BytesSource, FileSource
from transfer.transfer_queue import TransferQueue, UploadJob

__all__ = [
    "KekUploadAPI",
    "CancellationToken",
    "ChunkedDownloader",
    "ChunkedUploader",
    "FileDownloader",
    "FileUploader",
    "RetryPolicy",
    "ByteSource",
    "BytesSource",
    "FileSource",
    "TransferQueue",
    "UploadJob",
]
