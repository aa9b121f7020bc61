"""Uploads a stream of chunks against one remote upload stream."""

import asyncio
from typing import Optional

from common.checksum import IncrementalChecksumCalculator, compute_checksum
from common.constants import HTTP_SUCCESS_STATUS
from common.logging_config import get_logger
from common.types import UploadResult
from transfer.api_client import KekUploadAPI
from transfer.exceptions import (
    ApiConnectionError,
    KekUploadError,
    MalformedResponseError,
    RemoteError,
    RetryLimitExceededError,
    StreamNotInitializedError,
)
from transfer.retry import RetryPolicy

logger = get_logger(__name__)

NOT_INITIALIZED_MESSAGE = "Stream not initialized. Have you ran 'begin' yet?"

TRANSIENT_ERRORS = (ApiConnectionError, RemoteError, MalformedResponseError)


class ChunkedUploader:
    """
    Owns one upload stream and the running SHA-1 of everything sent to it.

    Usage:
        uploader = ChunkedUploader(api)
        await uploader.begin("txt")
        await uploader.upload(b"first chunk")
        await uploader.upload(b"second chunk")
        result = await uploader.finish()
    """

    def __init__(self, api: KekUploadAPI, retry_policy: Optional[RetryPolicy] = None):
        """
        Initialize chunked uploader.

        Args:
            api: API client used for every request
            retry_policy: Policy for failed chunk uploads (default: retry forever)
        """
        self.api = api
        self.retry_policy = retry_policy or RetryPolicy()
        self.stream: Optional[str] = None
        self.acknowledged_bytes = 0
        self._checksum = IncrementalChecksumCalculator()

    def _require_stream(self) -> str:
        if self.stream is None:
            raise StreamNotInitializedError(NOT_INITIALIZED_MESSAGE)
        return self.stream

    async def begin(self, ext: str, name: Optional[str] = None) -> str:
        """
        Open a new stream, discarding any previous in-memory state.

        The previous stream is not finished or removed; that is up to the caller.

        Args:
            ext: File extension
            name: Optional display name

        Returns:
            The new stream handle
        """
        self._checksum.reset()
        self.acknowledged_bytes = 0
        self.stream = None
        response = await self.api.create(ext, name)
        self.stream = response.stream
        logger.info(f"Opened upload stream [ext={ext}, name={name}, stream={self.stream}]")
        return self.stream

    async def upload(self, chunk: bytes) -> str:
        """
        Upload a chunk, retrying per the retry policy until it is acknowledged.

        Args:
            chunk: Chunk bytes

        Returns:
            Hex SHA-1 of the chunk

        Raises:
            StreamNotInitializedError: If begin has not been called
            RetryLimitExceededError: If a bounded retry policy gave up
        """
        stream = self._require_stream()
        chunk = bytes(chunk)
        chunk_hash = compute_checksum(chunk)

        attempt = 0
        last_error: Optional[KekUploadError] = None
        while True:
            attempt += 1
            try:
                response = await self.api.upload(stream, chunk_hash, chunk)
                if response.success:
                    break
                last_error = RemoteError(HTTP_SUCCESS_STATUS, response.model_dump())
            except TRANSIENT_ERRORS as e:
                last_error = e

            if not self.retry_policy.should_retry(attempt):
                logger.error(
                    f"Giving up on chunk {chunk_hash} after {attempt} attempt(s): {last_error}"
                )
                raise RetryLimitExceededError(
                    f"Chunk {chunk_hash} not delivered after {attempt} attempt(s)"
                ) from last_error

            delay = self.retry_policy.delay_for(attempt)
            logger.warning(
                f"Chunk upload failed (attempt {attempt}), retrying in {delay}s: {last_error}"
            )
            await asyncio.sleep(delay)

        # Stream digest only covers chunks the server acknowledged.
        self._checksum.update(chunk)
        self.acknowledged_bytes += len(chunk)
        logger.debug(f"Uploaded chunk {chunk_hash} ({len(chunk)} bytes, attempts={attempt})")
        return chunk_hash

    async def finish(self) -> UploadResult:
        """
        Finalize the stream into a permanent artifact.

        Returns:
            UploadResult with the artifact id and whole-stream hash

        Raises:
            StreamNotInitializedError: If begin has not been called
            RemoteError: If the API rejects the stream (e.g. hash mismatch)
        """
        stream = self._require_stream()
        stream_hash = self._checksum.finalize()
        response = await self.api.finish(stream, stream_hash)
        logger.info(f"Finished upload stream [id={response.id}, hash={stream_hash}]")
        return UploadResult(id=response.id, hash=stream_hash)

    async def destroy(self) -> None:
        """
        Discard the stream server-side without publishing anything.

        Raises:
            StreamNotInitializedError: If begin has not been called
        """
        stream = self._require_stream()
        await self.api.remove(stream)
        logger.info(f"Destroyed upload stream [stream={stream}]")
