"""Downloads an artifact into a local file."""

from pathlib import Path
from typing import Callable, Optional, Union

import aiofiles

from common.checksum import IncrementalChecksumCalculator
from common.constants import DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES
from common.logging_config import get_logger
from common.types import DownloadResult
from transfer.chunked_downloader import ChunkedDownloader

logger = get_logger(__name__)


class FileDownloader:
    """Drives a ChunkedDownloader until the whole artifact is written to disk."""

    def __init__(
        self,
        downloader: ChunkedDownloader,
        chunk_size: int = DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES
    ):
        """
        Initialize file downloader.

        Args:
            downloader: Downloader used for every pull
            chunk_size: Bytes requested per pull
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.downloader = downloader
        self.chunk_size = chunk_size

    async def download_file(
        self,
        id: str,
        destination: Union[str, Path],
        on_progress: Optional[Callable[[float], None]] = None
    ) -> DownloadResult:
        """
        Download an artifact to destination, overwriting it.

        Args:
            id: Artifact id
            destination: Output file path (parent directories are created)
            on_progress: Called with the fraction already written before each pull

        Returns:
            DownloadResult with the written size and SHA-1 of the content
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        length = await self.downloader.begin(id)
        checksum = IncrementalChecksumCalculator()

        async with aiofiles.open(destination, 'wb') as f:
            while self.downloader.remaining() > 0:
                if on_progress is not None:
                    on_progress(self.downloader.offset / length)
                data = await self.downloader.pull(self.chunk_size)
                checksum.update(data)
                await f.write(data)

        if checksum.size != length:
            logger.warning(f"Artifact {id} announced {length} bytes but {checksum.size} were written")

        digest = checksum.finalize()
        logger.info(f"Downloaded artifact [id={id}, size={checksum.size}, path={destination}]")
        return DownloadResult(id=id, path=destination, size=checksum.size, hash=digest)
