"""
Secure Logging Module
=====================

Security-aware logging for the auth core.

Security Features:
- Automatic redaction of passwords, tokens, secrets and email addresses
- Redaction of long hex/base64 blobs (session ids, hashes, signatures)
- Rotating log files with size limits
- Optional JSON output for log aggregation

Library code only ever calls logging.getLogger("fineauth.<area>");
handlers are attached by configure_logging() when the application asks
for them.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Final, Optional, Pattern

if TYPE_CHECKING:
    from fineauth.core.config import LoggingConfig


ROOT_LOGGER_NAME: Final[str] = "fineauth"

_CONSOLE_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FILE_FORMAT: Final[str] = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)

# Patterns for sensitive data detection
_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("token", re.compile(r'(?i)(token|bearer)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)(secret|private[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("credential", re.compile(r'(?i)(credential|password_hash)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
]

# Bare values that are sensitive on their own
_SENSITIVE_VALUES: Final[list[tuple[str, Pattern[str]]]] = [
    ("email", re.compile(r'[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}')),
    # Signed tokens and hex ids (32+ hex chars, optional signature suffix)
    ("hex", re.compile(r'(?i)\b[a-f0-9]{32,}(?:\.[A-Za-z0-9_-]+)?')),
    ("base64", re.compile(r'[A-Za-z0-9+/_-]{40,}={0,2}')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    Scans messages and arguments for credentials, tokens, session ids and
    email addresses and replaces them with [REDACTED].
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        """
        Initialize the secure log filter.

        Args:
            name: Logger name filter (empty string matches all)
            additional_patterns: Additional regex patterns to redact
        """
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact sensitive information from a record.

        Returns:
            Always True (record is always kept, just sanitized)
        """
        if record.msg and isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._sanitize(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._sanitize(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from text."""
        result = text

        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)

        for _name, pattern in _SENSITIVE_VALUES:
            result = pattern.sub(_REDACTED_TEXT, result)

        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)

        return result


class StructuredLogFormatter(logging.Formatter):
    """Formatter that outputs logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class SecureRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that creates its directory and rejects
    path traversal in the log file path.
    """

    def __init__(
        self,
        filename: str | Path,
        mode: str = "a",
        maxBytes: int = 10 * 1024 * 1024,
        backupCount: int = 5,
        encoding: str = "utf-8",
    ) -> None:
        if ".." in Path(filename).parts:
            raise ValueError("Log path cannot contain path traversal sequences")

        log_path = Path(filename).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            str(log_path),
            mode=mode,
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
        )


def get_secure_logger(
    name: str = ROOT_LOGGER_NAME,
    log_dir: Optional[Path] = None,
    level: str = "INFO",
    enable_console: bool = True,
    enable_json: bool = False,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    stream=None,
) -> logging.Logger:
    """
    Create a logger with automatic secret filtering.

    Args:
        name: Logger name
        log_dir: Directory for log files (no file output if not provided)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Whether to output to a stream
        enable_json: Whether to use JSON format for output
        max_file_size: Maximum log file size before rotation
        backup_count: Number of backup files to keep
        stream: Console stream (default: sys.stderr)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Already configured
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))
    secure_filter = SecureLogFilter()

    handlers: list[tuple[logging.Handler, logging.Formatter]] = []
    if enable_console:
        handlers.append((
            logging.StreamHandler(stream or sys.stderr),
            logging.Formatter(_CONSOLE_FORMAT, datefmt="%H:%M:%S"),
        ))
    if log_dir:
        handlers.append((
            SecureRotatingFileHandler(
                filename=Path(log_dir) / f"{name.replace('.', '_')}.log",
                maxBytes=max_file_size,
                backupCount=backup_count,
            ),
            logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"),
        ))

    for handler, text_formatter in handlers:
        handler.setFormatter(StructuredLogFormatter() if enable_json else text_formatter)
        handler.addFilter(secure_filter)
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def configure_logging(config: LoggingConfig, stream=None) -> logging.Logger:
    """
    Attach secure handlers to the fineauth logger hierarchy.

    Safe to call more than once; existing handlers are kept.
    """
    return get_secure_logger(
        ROOT_LOGGER_NAME,
        log_dir=config.log_dir,
        level=config.level,
        enable_console=config.enable_console,
        enable_json=config.enable_json,
        max_file_size=config.max_file_size_bytes,
        backup_count=config.backup_count,
        stream=stream,
    )
