"""Two-level chunking driver that uploads a whole byte source."""

from typing import Callable, Optional

from common.constants import DEFAULT_CHUNK_SIZE_BYTES, DEFAULT_READ_SIZE_BYTES
from common.logging_config import get_logger
from common.types import UploadResult
from transfer.cancellation import CancellationToken
from transfer.chunked_uploader import ChunkedUploader
from transfer.exceptions import (
    KekUploadError,
    NotUploadingError,
    UploadCancelledError,
    UploadInProgressError,
)
from transfer.sources import ByteSource

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]


class FileUploader:
    """
    Uploads a large source through a ChunkedUploader.

    The source is read in slices of read_size bytes; each slice is sent in
    pieces of chunk_size bytes. A running upload can be cancelled from another
    task; the request is honored before the next chunk is sent.

    Usage:
        uploader = FileUploader(ChunkedUploader(api))
        await uploader.begin("mp4", "holiday")
        await uploader.upload_file(FileSource("holiday.mp4"), print)
        result = await uploader.finish()
    """

    def __init__(
        self,
        uploader: ChunkedUploader,
        read_size: int = DEFAULT_READ_SIZE_BYTES,
        chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES
    ):
        """
        Initialize file uploader.

        Args:
            uploader: Chunk uploader that owns the remote stream
            read_size: Bytes read from the source at once (ideally a multiple of chunk_size)
            chunk_size: Bytes sent per chunk upload
        """
        if read_size <= 0 or chunk_size <= 0:
            raise ValueError("read_size and chunk_size must be positive")
        if read_size % chunk_size:
            logger.debug(
                f"read_size {read_size} is not a multiple of chunk_size {chunk_size}; "
                "slices end with a short chunk"
            )
        self.uploader = uploader
        self.read_size = read_size
        self.chunk_size = chunk_size
        self._uploading = False
        self._cancellation = CancellationToken()

    @property
    def uploading(self) -> bool:
        return self._uploading

    async def begin(self, ext: str, name: Optional[str] = None) -> str:
        return await self.uploader.begin(ext, name)

    async def finish(self) -> UploadResult:
        return await self.uploader.finish()

    async def destroy(self) -> None:
        await self.uploader.destroy()

    async def upload_file(
        self,
        source: ByteSource,
        on_progress: Optional[ProgressCallback] = None
    ) -> None:
        """
        Upload every byte of source to the current stream.

        Args:
            source: Byte source to upload
            on_progress: Called before each chunk with the fraction of bytes already queued

        Raises:
            UploadInProgressError: If another upload is running on this instance
            UploadCancelledError: If cancel was requested while uploading
            StreamNotInitializedError: If begin has not been called
        """
        if self._uploading:
            raise UploadInProgressError("An upload is already running on this uploader")

        self._uploading = True
        total = source.size
        logger.info(
            f"Uploading {source!r} [read_size={self.read_size}, chunk_size={self.chunk_size}]"
        )

        try:
            for i in range(0, total, self.read_size):
                data = await source.read(i, min(i + self.read_size, total))

                for f in range(0, len(data), self.chunk_size):
                    if on_progress is not None:
                        on_progress((i + f) / total)

                    if self._cancellation.requested:
                        await self._abort()
                        raise UploadCancelledError("Cancelled")

                    await self.uploader.upload(data[f:f + self.chunk_size])
        finally:
            self._uploading = False
            self._cancellation.reject(
                NotUploadingError("Upload ended before the cancellation was observed")
            )

        logger.info(f"Uploaded {total} bytes from {source!r}")

    async def _abort(self) -> None:
        logger.info("Cancellation requested, destroying upload stream")
        try:
            await self.uploader.destroy()
        except KekUploadError as e:
            logger.warning(f"Failed to destroy stream during cancellation: {e}")
        self._cancellation.acknowledge()

    async def cancel(self) -> None:
        """
        Cancel the running upload and wait until it has aborted.

        Raises:
            NotUploadingError: If no upload is running
        """
        if not self._uploading:
            raise NotUploadingError("Not uploading. Have you ran 'upload_file' yet?")
        await self._cancellation.request()
