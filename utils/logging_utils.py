"""
Logging utilities for request tracing.
"""
import logging
import os
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ('authorization', 'x-api-key', 'api-key', 'cookie')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def redact_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Copy headers with credential values replaced by [REDACTED]"""
    if not headers:
        return {}
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def setup_logging(level: str = "info", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the root logger with a console handler and an optional file handler

    Args:
        level: Level name such as "debug" or "info"
        log_file: Optional path of a log file to append to

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(os.path.abspath(log_file), mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root_logger
