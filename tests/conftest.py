"""Shared pytest fixtures for all tests."""

import asyncio
import itertools
from typing import Dict, List, Optional

import pytest

from cli.config import Config
from common.checksum import compute_checksum
from transfer.exceptions import ApiConnectionError, RemoteError
from transfer.schemas import (
    CreateStreamResponse,
    FinishStreamResponse,
    LengthResponse,
    RemoveStreamResponse,
    UploadChunkResponse,
)


class FakeKekUploadAPI:
    """
    In-memory stand-in for KekUploadAPI.

    Records every call in `calls`, stores acknowledged chunks per stream and
    verifies chunk and stream hashes the way the server does.
    """

    def __init__(self):
        self.calls: List[tuple] = []
        self.streams: Dict[str, List[bytes]] = {}
        self.artifacts: Dict[str, bytes] = {}
        self.removed: List[str] = []
        self.upload_failures = 0
        self.create_error: Optional[Exception] = None
        self.finish_error: Optional[Exception] = None
        self._stream_ids = itertools.count()
        self._artifact_ids = itertools.count()

    async def create(self, ext, name=None):
        self.calls.append(('create', ext, name))
        await asyncio.sleep(0)
        if self.create_error is not None:
            raise self.create_error
        stream = f"stream{next(self._stream_ids)}"
        self.streams[stream] = []
        return CreateStreamResponse(stream=stream)

    async def upload(self, stream, hash, chunk):
        self.calls.append(('upload', stream, hash, len(chunk)))
        await asyncio.sleep(0)
        if self.upload_failures > 0:
            self.upload_failures -= 1
            raise ApiConnectionError("simulated network failure")
        if stream not in self.streams:
            raise RemoteError(404, {'error': 'stream not found'})
        assert compute_checksum(chunk) == hash
        self.streams[stream].append(bytes(chunk))
        return UploadChunkResponse(success=True)

    async def finish(self, stream, hash):
        self.calls.append(('finish', stream, hash))
        await asyncio.sleep(0)
        if self.finish_error is not None:
            raise self.finish_error
        data = b"".join(self.streams.pop(stream))
        if compute_checksum(data) != hash:
            raise RemoteError(400, {'error': 'hash mismatch'})
        artifact_id = f"file{next(self._artifact_ids)}"
        self.artifacts[artifact_id] = data
        return FinishStreamResponse(id=artifact_id)

    async def remove(self, stream):
        self.calls.append(('remove', stream))
        await asyncio.sleep(0)
        self.streams.pop(stream, None)
        self.removed.append(stream)
        return RemoveStreamResponse(success=True)

    async def length(self, id):
        self.calls.append(('length', id))
        await asyncio.sleep(0)
        if id not in self.artifacts:
            raise RemoteError(404, {'error': 'file not found'})
        return LengthResponse(size=len(self.artifacts[id]))

    async def download_chunk(self, id, offset, size):
        self.calls.append(('download_chunk', id, offset, size))
        await asyncio.sleep(0)
        return self.artifacts[id][offset:offset + size]

    async def close(self):
        self.calls.append(('close',))

    def calls_named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_api():
    """In-memory API double."""
    return FakeKekUploadAPI()


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .kekupload directory
    """
    config_dir = tmp_path / '.kekupload'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample binary file for upload tests.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to sample file (10 000 bytes)
    """
    file_path = tmp_path / 'sample.bin'
    file_path.write_bytes(bytes(range(256)) * 39 + bytes(16))
    return file_path
