"""Pull-based reader over a finalized artifact."""

from typing import Optional

from common.logging_config import get_logger
from transfer.api_client import KekUploadAPI
from transfer.exceptions import StreamNotInitializedError

logger = get_logger(__name__)


class ChunkedDownloader:
    """
    Serves sequential byte ranges of one artifact.

    Usage:
        downloader = ChunkedDownloader(api)
        await downloader.begin("artifact-id")
        while downloader.remaining() > 0:
            data = await downloader.pull(2 * 1024 * 1024)
    """

    def __init__(self, api: KekUploadAPI):
        self.api = api
        self.id: Optional[str] = None
        self.length = -1
        self.offset = 0

    async def begin(self, id: str) -> int:
        """
        Start reading an artifact from its first byte.

        Args:
            id: Artifact id

        Returns:
            Total length of the artifact in bytes
        """
        self.id = None
        self.length = -1
        self.offset = 0
        response = await self.api.length(id)
        self.length = response.size
        self.id = id
        logger.info(f"Opened artifact for download [id={id}, length={self.length}]")
        return self.length

    def remaining(self) -> int:
        """Bytes left to pull; only meaningful after begin."""
        return self.length - self.offset

    async def pull(self, size: int) -> bytes:
        """
        Pull the next bytes of the artifact.

        Args:
            size: Maximum number of bytes to return

        Returns:
            Up to size bytes; empty once the artifact is exhausted

        Raises:
            StreamNotInitializedError: If begin has not been called
        """
        if self.id is None:
            raise StreamNotInitializedError("Download not initialized. Have you ran 'begin' yet?")

        size = max(0, min(size, self.remaining()))
        if size == 0:
            return b""

        data = await self.api.download_chunk(self.id, self.offset, size)
        if len(data) != size:
            logger.warning(
                f"Requested {size} bytes at offset {self.offset} of {self.id}, received {len(data)}"
            )
        self.offset += size
        logger.debug(f"Pulled {size} bytes [id={self.id}, remaining={self.remaining()}]")
        return data
