"""Async HTTP client for the KekUpload API."""

from typing import Any, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from common.constants import DEFAULT_REQUEST_TIMEOUT_SECONDS, HTTP_SUCCESS_STATUS
from common.logging_config import get_logger
from transfer.exceptions import ApiConnectionError, MalformedResponseError, RemoteError
from transfer.schemas import (
    CreateStreamResponse,
    FinishStreamResponse,
    LengthResponse,
    RemoveStreamResponse,
    UploadChunkResponse,
)

logger = get_logger(__name__)

ResponseModel = TypeVar('ResponseModel', bound=BaseModel)


def _segment(value: Any) -> str:
    """Percent-encode a single path segment."""
    return quote(str(value), safe='')


class KekUploadAPI:
    """Thin async wrapper over the create/upload/finish/remove/length/download endpoints."""

    def __init__(
        self,
        base: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        session: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize API client.

        Args:
            base: Base URL of the API (e.g. "https://u.kotw.dev/api/")
            timeout: Request timeout in seconds
            session: Optional preconfigured httpx.AsyncClient (testing)
        """
        self.base = base if base.endswith('/') else f"{base}/"
        self.session = session or httpx.AsyncClient(base_url=self.base, timeout=timeout)
        logger.info(f"Initialized KekUploadAPI [base_url={self.base}]")

    async def __aenter__(self) -> 'KekUploadAPI':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        raw: bool = False
    ) -> Any:
        """
        Issue a request and decode the response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Path relative to the base URL
            body: Optional binary request body
            raw: Return the raw bytes instead of decoded JSON

        Returns:
            Decoded JSON value, or bytes when raw is set

        Raises:
            ApiConnectionError: If the request could not be completed
            RemoteError: If the status is not a success status
            MalformedResponseError: If a JSON body was expected but not received
        """
        logger.debug(f"Making request: {method} {path}")

        try:
            response = await self.session.request(method, path, content=body)
        except httpx.HTTPError as e:
            raise ApiConnectionError(f"{method} {path} failed: {type(e).__name__}: {e}") from e

        logger.debug(f"Response received: {method} {path} status={response.status_code}")

        if response.status_code != HTTP_SUCCESS_STATUS:
            raise RemoteError(response.status_code, self._decode_error(response))

        if raw:
            return response.content

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{method} {path} returned a non-JSON body") from e

    def _decode_error(self, response: httpx.Response) -> Any:
        """
        Decode an error body as JSON, falling back to text.

        Args:
            response: HTTP response object

        Returns:
            Decoded JSON value, response text, or None for an empty body
        """
        try:
            return response.json()
        except ValueError:
            return response.text or None

    def _parse(self, model: Type[ResponseModel], data: Any) -> ResponseModel:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(f"Unexpected {model.__name__} body: {data!r}") from e

    async def create(self, ext: str, name: Optional[str] = None) -> CreateStreamResponse:
        """
        Open a new upload stream.

        Args:
            ext: File extension of the upload
            name: Optional display name

        Returns:
            CreateStreamResponse with the stream handle
        """
        path = f"c/{_segment(ext)}"
        if name is not None:
            path = f"{path}/{_segment(name)}"
        return self._parse(CreateStreamResponse, await self._request('POST', path))

    async def upload(self, stream: str, hash: str, chunk: bytes) -> UploadChunkResponse:
        """
        Upload one chunk addressed by its SHA-1 hash.

        Args:
            stream: Stream handle from create
            hash: Hex SHA-1 of the chunk
            chunk: Chunk bytes

        Returns:
            UploadChunkResponse
        """
        data = await self._request('POST', f"u/{_segment(stream)}/{_segment(hash)}", bytes(chunk))
        return self._parse(UploadChunkResponse, data)

    async def finish(self, stream: str, hash: str) -> FinishStreamResponse:
        """
        Finalize a stream into a permanent artifact.

        Args:
            stream: Stream handle from create
            hash: Hex SHA-1 of the whole stream

        Returns:
            FinishStreamResponse with the artifact id
        """
        data = await self._request('POST', f"f/{_segment(stream)}/{_segment(hash)}")
        return self._parse(FinishStreamResponse, data)

    async def remove(self, stream: str) -> RemoveStreamResponse:
        """
        Discard an in-progress stream.

        Args:
            stream: Stream handle from create

        Returns:
            RemoveStreamResponse
        """
        return self._parse(RemoveStreamResponse, await self._request('POST', f"r/{_segment(stream)}"))

    async def length(self, id: str) -> LengthResponse:
        """
        Get the byte length of a finalized artifact.

        Args:
            id: Artifact id

        Returns:
            LengthResponse with the size in bytes
        """
        return self._parse(LengthResponse, await self._request('GET', f"l/{_segment(id)}"))

    async def download_chunk(self, id: str, offset: int, size: int) -> bytes:
        """
        Fetch a byte range of a finalized artifact.

        Args:
            id: Artifact id
            offset: Start offset in bytes
            size: Number of bytes to fetch

        Returns:
            Raw bytes of the range
        """
        return await self._request('GET', f"d/{_segment(id)}/{int(offset)}/{int(size)}", raw=True)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()
