"""Configuration management for the KekUpload CLI."""

import json
import os
import shutil
import tempfile
from pathlib import Path

from common.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES,
    DEFAULT_READ_SIZE_BYTES,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from common.logging_config import get_logger
from transfer.retry import RetryPolicy

logger = get_logger(__name__)


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "base_url": os.environ.get("KEKUPLOAD_BASE_URL", DEFAULT_API_BASE_URL),
        "timeout": DEFAULT_REQUEST_TIMEOUT_SECONDS,
        "read_size": DEFAULT_READ_SIZE_BYTES,
        "chunk_size": DEFAULT_CHUNK_SIZE_BYTES,
        "download_chunk_size": DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES,
        "max_retries": None,
        "retry_initial_delay": 0,
        "retry_backoff_multiplier": 2,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.kekupload/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.kekupload' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Config file {self.config_path} unreadable ({e}), using defaults")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    logger.warning(f"Could not back up config file to {backup_path}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError as e:
                logger.warning(f"Could not write default config to {self.config_path}: {e}")
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def get_base_url(self) -> str:
        """
        Get API base URL.

        Returns:
            Base URL string ending with '/' (e.g., "https://u.kotw.dev/api/")
        """
        base_url = self.data.get('base_url') or DEFAULT_API_BASE_URL
        return base_url if base_url.endswith('/') else f"{base_url}/"

    def get_timeout(self) -> int:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', DEFAULT_REQUEST_TIMEOUT_SECONDS)

    def get_transfer_sizes(self) -> dict:
        """
        Get slicing configuration.

        Returns:
            Dictionary with 'read_size', 'chunk_size' and 'download_chunk_size' in bytes
        """
        return {
            'read_size': int(self.data.get('read_size', DEFAULT_READ_SIZE_BYTES)),
            'chunk_size': int(self.data.get('chunk_size', DEFAULT_CHUNK_SIZE_BYTES)),
            'download_chunk_size': int(
                self.data.get('download_chunk_size', DEFAULT_DOWNLOAD_CHUNK_SIZE_BYTES)
            ),
        }

    def get_retry_config(self) -> dict:
        """
        Get retry configuration.

        Returns:
            Dictionary with 'max_retries', 'retry_initial_delay' and 'retry_backoff_multiplier'
        """
        return {
            'max_retries': self.data.get('max_retries'),
            'retry_initial_delay': self.data.get('retry_initial_delay', 0),
            'retry_backoff_multiplier': self.data.get('retry_backoff_multiplier', 2),
        }

    def get_retry_policy(self) -> RetryPolicy:
        """
        Build the chunk retry policy.

        max_retries counts retries after the first attempt; null means retry forever.

        Returns:
            RetryPolicy instance
        """
        retry_config = self.get_retry_config()
        max_retries = retry_config['max_retries']
        return RetryPolicy(
            max_attempts=None if max_retries is None else int(max_retries) + 1,
            initial_delay=float(retry_config['retry_initial_delay']),
            backoff_multiplier=float(retry_config['retry_backoff_multiplier']),
        )
