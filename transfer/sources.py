"""Byte sources that materialize ranges of a large payload on demand."""

import os
from pathlib import Path
from typing import Protocol, Union

import aiofiles


class ByteSource(Protocol):
    """A payload of known size that can be read by half-open byte range."""

    size: int

    async def read(self, start: int, end: int) -> bytes:
        ...


class FileSource:
    """Reads ranges of a local file without loading it whole."""

    def __init__(self, path: Union[str, Path]):
        """
        Initialize file source.

        Args:
            path: Path to a regular file

        Raises:
            FileNotFoundError: If the file does not exist
            IsADirectoryError: If the path is a directory
        """
        self.path = Path(path)
        if self.path.is_dir():
            raise IsADirectoryError(f"Not a file: {self.path}")
        self.size = os.path.getsize(self.path)

    async def read(self, start: int, end: int) -> bytes:
        """
        Read the byte range [start, end) of the file.

        Args:
            start: First byte offset
            end: Offset one past the last byte

        Returns:
            Bytes of the range (shorter if the file ends first)
        """
        async with aiofiles.open(self.path, 'rb') as f:
            await f.seek(start)
            return await f.read(max(0, end - start))

    def __repr__(self) -> str:
        return f"FileSource({str(self.path)!r}, size={self.size})"


class BytesSource:
    """In-memory payload."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self.size = len(self._data)

    async def read(self, start: int, end: int) -> bytes:
        return self._data[start:end]

    def __repr__(self) -> str:
        return f"BytesSource(size={self.size})"
