"""
Shared logging configuration for DBEN.

Provides a consistent logging format with clear service identification for
hosted deployment and local development. Handlers are installed on the root
logger so that every module's ``logging.getLogger(__name__)`` logger writes
through them.

Usage:
    from logging_config import setup_logging
    logger = setup_logging("web_app")
"""

import logging
import os
import sys
import json
from datetime import datetime, timezone
from typing import Optional


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "service": self.service_name,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_data = getattr(record, 'extra_data', None)
        if extra_data is not None:
            log_entry["data"] = extra_data

        return json.dumps(log_entry)


class ServiceFormatter(logging.Formatter):
    """Standard formatter with clear service prefix."""

    def __init__(self, service_name: str):
        # Format: [web_app] 2026-01-26 19:45:00 - dben.models.queries - INFO - Message
        super().__init__(
            fmt=f'[{service_name}] %(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


def get_log_level() -> int:
    log_level_str = os.getenv('LOG_LEVEL', 'INFO').upper()
    return getattr(logging, log_level_str, logging.INFO)


def use_json_format() -> bool:
    return os.getenv('LOG_FORMAT', '').lower() == 'json'


def setup_logging(
    service_name: str,
    log_file: Optional[str] = None,
    use_json: Optional[bool] = None
) -> logging.Logger:
    """
    Setup logging for DBEN with consistent formatting.

    Args:
        service_name: Name shown in every line (e.g., "web_app")
        log_file: Optional path to log file. If None, logs to console only.
        use_json: Whether to use JSON format. If None, follows the LOG_FORMAT
                  environment variable.

    Returns:
        The logger named after the service.
    """
    level = get_log_level()
    if use_json is None:
        use_json = use_json_format()

    formatter = JSONFormatter(service_name) if use_json else ServiceFormatter(service_name)

    root = logging.getLogger()
    root.setLevel(level)

    # Clear any existing handlers to avoid duplicates
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return logging.getLogger(service_name)


def silence_noisy_loggers():
    """Silence commonly noisy third-party loggers."""
    noisy_loggers = [
        'watchfiles.main',
        'httpx',
        'httpcore',
        'hpack',
        'postgrest',
        'supabase',
    ]

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
