"""
Logging setup for applications embedding oggpcm.

The library itself only creates module loggers under the "oggpcm" namespace;
configure_logging() attaches a handler to that namespace. Handler write
failures degrade silently so logging can never interrupt decoding.
"""

import logging
import logging.handlers
import sys
from typing import Optional

from oggpcm.config import DecoderConfig

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
PACKAGE_LOGGER = "oggpcm"


def _make_safe(handler: logging.Handler) -> logging.Handler:
    """Wrap emit so that I/O errors while writing a record are dropped."""
    original_emit = handler.emit

    def safe_emit(record):
        try:
            original_emit(record)
        except (IOError, OSError):
            pass

    handler.emit = safe_emit
    return handler


def configure_logging(config: Optional[DecoderConfig] = None) -> logging.Logger:
    """
    Attach a handler to the oggpcm package logger.

    Uses WatchedFileHandler when config.log_file is set (tolerates external
    log rotation), otherwise a stderr StreamHandler. Calling it again
    replaces the handler installed by the previous call.

    Args:
        config: Decoder configuration (default: DecoderConfig())

    Returns:
        The configured package logger
    """
    config = config or DecoderConfig()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if config.log_file:
        handler: logging.Handler = logging.handlers.WatchedFileHandler(config.log_file, mode='a')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._oggpcm_handler = True
    _make_safe(handler)

    # Prevent duplicate handlers on repeated configuration
    for existing in list(package_logger.handlers):
        if getattr(existing, "_oggpcm_handler", False):
            package_logger.removeHandler(existing)
            existing.close()

    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, config.log_level, logging.INFO))
    return package_logger
