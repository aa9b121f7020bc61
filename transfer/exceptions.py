"""Custom exception classes for the transfer engine."""

from typing import Any


class KekUploadError(Exception):
    """
    Base exception class for all transfer-related errors.
    """
    pass


class StreamNotInitializedError(KekUploadError):
    """
    Raised when an operation needs a stream or artifact id before 'begin' ran.
    """
    pass


class ApiConnectionError(KekUploadError):
    """
    Raised when a request cannot reach the API (connect error, timeout, broken response).
    """
    pass


class RemoteError(KekUploadError):
    """
    Raised when the API answers with a non-success status.

    Attributes:
        status_code: HTTP status returned by the API
        detail: Decoded response body (JSON value, or text if not JSON)
    """

    def __init__(self, status_code: int, detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API returned status {status_code}: {detail}")


class MalformedResponseError(KekUploadError):
    """
    Raised when a success response does not have the expected shape.
    """
    pass


class RetryLimitExceededError(KekUploadError):
    """
    Raised when a chunk could not be delivered within the retry policy.
    """
    pass


class UploadCancelledError(KekUploadError):
    """
    Raised by an upload that observed a cancellation request and aborted.
    """
    pass


class NotUploadingError(KekUploadError):
    """
    Raised when cancelling while no file upload is running.
    """
    pass


class UploadInProgressError(KekUploadError):
    """
    Raised when starting a file upload on an uploader that is already busy.
    """
    pass


class JobNotFoundError(KekUploadError):
    """
    Raised when a job id is neither active nor queued.
    """
    pass
