"""Tests for ChunkedUploader."""

import httpx
import pytest

from common.checksum import compute_checksum
from common.types import UploadResult
from transfer.api_client import KekUploadAPI
from transfer.chunked_uploader import ChunkedUploader
from transfer.exceptions import (
    ApiConnectionError,
    RemoteError,
    RetryLimitExceededError,
    StreamNotInitializedError,
)
from transfer.retry import RetryPolicy


@pytest.mark.asyncio
async def test_begin_stores_stream(fake_api):
    uploader = ChunkedUploader(fake_api)

    stream = await uploader.begin('txt', 'notes')

    assert stream == 'stream0'
    assert uploader.stream == 'stream0'
    assert fake_api.calls == [('create', 'txt', 'notes')]


@pytest.mark.asyncio
async def test_upload_returns_chunk_hash(fake_api):
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')

    chunk_hash = await uploader.upload(b'hello world')

    assert chunk_hash == compute_checksum(b'hello world')
    assert fake_api.calls_named('upload') == [('upload', 'stream0', chunk_hash, 11)]
    assert uploader.acknowledged_bytes == 11


@pytest.mark.asyncio
async def test_finish_hash_matches_concatenation_of_chunks(fake_api):
    chunks = [b'alpha', b'beta' * 1000, b'', bytes(range(256)) * 3]
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')

    for chunk in chunks:
        await uploader.upload(chunk)
    result = await uploader.finish()

    assert isinstance(result, UploadResult)
    assert result.hash == compute_checksum(b''.join(chunks))
    assert fake_api.artifacts[result.id] == b''.join(chunks)


@pytest.mark.asyncio
async def test_begin_resets_running_digest(fake_api):
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')
    await uploader.upload(b'abandoned stream data')

    await uploader.begin('bin')
    await uploader.upload(b'fresh')
    result = await uploader.finish()

    assert result.hash == compute_checksum(b'fresh')
    assert uploader.acknowledged_bytes == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("operation", ["upload", "finish", "destroy"])
async def test_operations_before_begin_fail_without_transport_call(fake_api, operation):
    uploader = ChunkedUploader(fake_api)
    args = (b'chunk',) if operation == 'upload' else ()

    with pytest.raises(StreamNotInitializedError):
        await getattr(uploader, operation)(*args)

    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_upload_retries_until_success(fake_api):
    fake_api.upload_failures = 2
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')

    chunk_hash = await uploader.upload(b'persistent')

    assert chunk_hash == compute_checksum(b'persistent')
    assert len(fake_api.calls_named('upload')) == 3
    assert fake_api.streams['stream0'] == [b'persistent']


@pytest.mark.asyncio
async def test_bounded_policy_gives_up(fake_api):
    fake_api.upload_failures = 5
    uploader = ChunkedUploader(fake_api, RetryPolicy(max_attempts=3))
    await uploader.begin('bin')

    with pytest.raises(RetryLimitExceededError) as exc_info:
        await uploader.upload(b'lost')

    assert isinstance(exc_info.value.__cause__, ApiConnectionError)
    assert len(fake_api.calls_named('upload')) == 3
    assert uploader.acknowledged_bytes == 0


@pytest.mark.asyncio
async def test_failed_chunk_not_counted_in_stream_hash(fake_api):
    uploader = ChunkedUploader(fake_api, RetryPolicy(max_attempts=1))
    await uploader.begin('bin')
    await uploader.upload(b'kept')

    fake_api.upload_failures = 1
    with pytest.raises(RetryLimitExceededError):
        await uploader.upload(b'dropped')

    result = await uploader.finish()
    assert result.hash == compute_checksum(b'kept')


@pytest.mark.asyncio
async def test_destroy_removes_stream(fake_api):
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')

    await uploader.destroy()

    assert fake_api.removed == ['stream0']


@pytest.mark.asyncio
async def test_finish_propagates_remote_error(fake_api):
    fake_api.finish_error = RemoteError(400, {'error': 'hash mismatch'})
    uploader = ChunkedUploader(fake_api)
    await uploader.begin('bin')

    with pytest.raises(RemoteError):
        await uploader.finish()


@pytest.mark.asyncio
async def test_retry_over_http_fails_twice_then_succeeds():
    """Two 500 responses then 200: exactly three requests and one hash."""
    upload_requests = []

    def handler(request):
        if request.url.path.startswith('/api/c/'):
            return httpx.Response(200, json={'stream': 's1'})
        upload_requests.append(request)
        if len(upload_requests) < 3:
            return httpx.Response(500, json={'error': 'busy'})
        return httpx.Response(200, json={'success': True})

    session = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url='http://test/api/')
    api = KekUploadAPI('http://test/api/', session=session)
    uploader = ChunkedUploader(api)
    await uploader.begin('txt')

    chunk_hash = await uploader.upload(b'retry me')

    assert chunk_hash == compute_checksum(b'retry me')
    assert len(upload_requests) == 3


@pytest.mark.asyncio
async def test_success_false_body_is_retried():
    responses = iter([{'success': False}, {'success': True}])
    upload_count = 0

    def handler(request):
        nonlocal upload_count
        if request.url.path.startswith('/api/c/'):
            return httpx.Response(200, json={'stream': 's1'})
        upload_count += 1
        return httpx.Response(200, json=next(responses))

    session = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url='http://test/api/')
    uploader = ChunkedUploader(KekUploadAPI('http://test/api/', session=session))
    await uploader.begin('txt')

    await uploader.upload(b'data')

    assert upload_count == 2
