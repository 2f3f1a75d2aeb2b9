"""
Configuration for the oggpcm decoder.

Reads configuration from a .env file and environment variables with
sensible defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Default .env file location (relative to the working directory)
DEFAULT_ENV_FILE = Path(".env")

# Bytes requested from the byte source per refill
DEFAULT_READ_CHUNK_SIZE = 8192

VALID_BYTE_ORDERS = ("little", "big")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger(__name__)


def _load_env_file() -> None:
    """Load environment variables from .env file if it exists."""
    env_file = os.getenv("OGGPCM_ENV_FILE", str(DEFAULT_ENV_FILE))
    env_path = Path(env_file)

    if env_path.exists():
        load_dotenv(env_path, override=False)  # Don't override existing env vars


@dataclass
class DecoderConfig:
    """Decoder configuration loaded from .env file and environment variables."""

    # Refill size for each byte source read
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE

    # Byte order for PcmBuffer instances created by the session helpers
    byte_order: str = "little"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def load_config(cls) -> "DecoderConfig":
        """
        Load configuration from environment variables.

        Returns:
            DecoderConfig instance with loaded values

        Raises:
            ValueError: If configuration is invalid
        """
        # Load .env file first (if it exists)
        _load_env_file()

        chunk_str = os.getenv("OGGPCM_READ_CHUNK_SIZE", str(DEFAULT_READ_CHUNK_SIZE))
        try:
            read_chunk_size = int(chunk_str)
        except ValueError:
            raise ValueError(f"Invalid OGGPCM_READ_CHUNK_SIZE: {chunk_str} (must be an integer)")

        byte_order = os.getenv("OGGPCM_BYTE_ORDER", "little").strip().lower()
        log_level = os.getenv("OGGPCM_LOG_LEVEL", "INFO").strip().upper()
        log_file = os.getenv("OGGPCM_LOG_FILE") or None

        config = cls(
            read_chunk_size=read_chunk_size,
            byte_order=byte_order,
            log_level=log_level,
            log_file=log_file,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: If any value is out of range
        """
        if self.read_chunk_size <= 0:
            raise ValueError(
                f"Invalid OGGPCM_READ_CHUNK_SIZE: {self.read_chunk_size} (must be > 0)"
            )
        if self.byte_order not in VALID_BYTE_ORDERS:
            raise ValueError(
                f"Invalid OGGPCM_BYTE_ORDER: {self.byte_order} (must be 'little' or 'big')"
            )
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid OGGPCM_LOG_LEVEL: {self.log_level} "
                f"(must be one of {', '.join(VALID_LOG_LEVELS)})"
            )
