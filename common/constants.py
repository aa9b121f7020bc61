"""Project-wide constants (transfer sizes, API defaults)."""

DEFAULT_READ_SIZE_BYTES: int = 32 * 1024 * 1024  # 32 MiB slices read from the source
DEFAULT_CHUNK_SIZE_BYTES: int = 2 * 1024 * 1024  # 2 MiB chunks sent per request
DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES: int = 2 * 1024 * 1024

DEFAULT_API_BASE_URL: str = "https://u.kotw.dev/api/"
DEFAULT_REQUEST_TIMEOUT_SECONDS: int = 30
HTTP_SUCCESS_STATUS: int = 200

DEFAULT_EXTENSION: str = "none"
