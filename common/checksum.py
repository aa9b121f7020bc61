"""SHA-1 helpers shared by per-chunk addressing and whole-stream hashing."""

import hashlib
from typing import Union

# The API addresses chunks and verifies finished streams by SHA-1.
CHECKSUM_ALGORITHM = 'sha1'

Buffer = Union[bytes, bytearray, memoryview]


def compute_checksum(data: Buffer) -> str:
    """
    Compute the hex digest used to address a chunk.

    Args:
        data: Chunk bytes

    Returns:
        Lowercase hex SHA-1 of data
    """
    return hashlib.new(CHECKSUM_ALGORITHM, data).hexdigest()


class IncrementalChecksumCalculator:
    """
    Running digest over a sequence of chunks.

    The result equals compute_checksum over the concatenation of every chunk
    passed to update, in order. size counts the bytes hashed so far.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Start a new, empty digest."""
        self._hasher = hashlib.new(CHECKSUM_ALGORITHM)
        self._digest = None
        self.size = 0

    def update(self, data: Buffer) -> None:
        """
        Append data to the digest.

        Raises:
            ValueError: If the digest was already finalized
        """
        if self._digest is not None:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
        self.size += len(data)

    def finalize(self) -> str:
        """
        Close the digest. Calling it again returns the same value.

        Returns:
            Lowercase hex SHA-1 of everything passed to update
        """
        if self._digest is None:
            self._digest = self._hasher.hexdigest()
        return self._digest
