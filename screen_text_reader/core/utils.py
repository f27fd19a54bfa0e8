"""Core utilities."""

import logging
import shutil
import subprocess
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from screen_text_reader.core.settings.app_settings import LoggingSettings

logger = logging.getLogger(__name__)

# Handler names used to identify handlers and avoid duplicates
APP_STREAM_HANDLER_NAME = "str_app_stream_handler"
APP_FILE_HANDLER_NAME = "str_app_file_handler"

# Endpoints polled by the frontend on a timer; kept out of access logs
QUIET_ENDPOINTS = ("/health", "/api/status")


class PollingEndpointFilter(logging.Filter):
    """Filter to exclude frequently polled endpoints from access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter out polling log entries.

        Args:
            record (logging.LogRecord): Log record to check.

        Returns:
            bool: False to exclude the record, True to include it.
        """
        message = record.getMessage()
        if "GET" not in message:
            return True
        return not any(endpoint in message for endpoint in QUIET_ENDPOINTS)


def get_tesseract_version() -> str | None:
    """
    Get Tesseract version string.

    Returns:
        str | None: Version string if tesseract is available, None otherwise.
    """
    tesseract_path = shutil.which("tesseract")
    if not tesseract_path:
        return None

    try:
        result = subprocess.run(
            args=[tesseract_path, "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        # First line contains version info
        version_line = result.stdout.split("\n")[0] if result.stdout else None
        if version_line:
            return version_line.strip()
        return None
    except (subprocess.TimeoutExpired, subprocess.SubprocessError, OSError) as e:
        logger.warning(f"Failed to get tesseract version: {e}")
        return None


def parse_region_argument(value: str) -> tuple[int, int, int, int]:
    """
    Parse a region given as ``x,y,width,height``.

    Args:
        value (str): Comma separated region string.

    Returns:
        tuple[int, int, int, int]: The parsed (x, y, width, height).

    Raises:
        ValueError: If the string does not hold four non-negative integers.
    """
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Region must be x,y,width,height, got: {value!r}")
    numbers = tuple(int(part) for part in parts)
    if any(n < 0 for n in numbers):
        raise ValueError(f"Region values must be non-negative, got: {value!r}")
    x, y, width, height = numbers
    return x, y, width, height


def _get_handler_by_name(root_logger: logging.Logger, name: str) -> logging.Handler | None:
    """
    Get a handler by name from a logger.

    Args:
        root_logger (logging.Logger): Logger to search.
        name (str): Handler name to find.

    Returns:
        logging.Handler | None: Handler if found, None otherwise.
    """
    for handler in root_logger.handlers:
        if getattr(handler, "name", None) == name:
            return handler
    return None


def _remove_handler_by_name(root_logger: logging.Logger, name: str) -> None:
    """
    Remove a handler by name from a logger.

    Args:
        root_logger (logging.Logger): Logger to remove from.
        name (str): Handler name to remove.
    """
    handler = _get_handler_by_name(root_logger=root_logger, name=name)
    if handler:
        root_logger.removeHandler(handler)
        handler.close()


def _get_min_level(root_level: str, loggers: dict[str, str]) -> int:
    """
    Get the minimum log level from root and all custom loggers.

    Args:
        root_level (str): The root logger level string.
        loggers (dict[str, str]): Dict of logger name to level string.

    Returns:
        int: The minimum numeric log level.
    """
    levels: list[int] = [logging.getLevelName(root_level.upper())]
    for level in loggers.values():
        levels.append(logging.getLevelName(level.upper()))
    return min(levels)


def setup_logging(settings: LoggingSettings) -> None:
    """
    Setup logging configuration for the application.

    Args:
        settings (LoggingSettings): Logging settings to configure logging.
    """
    root_logger = logging.getLogger()

    min_level = _get_min_level(
        root_level=settings.log_level,
        loggers=settings.loggers,
    )

    root_logger.setLevel(settings.log_level)

    _remove_handler_by_name(root_logger=root_logger, name=APP_STREAM_HANDLER_NAME)
    _remove_handler_by_name(root_logger=root_logger, name=APP_FILE_HANDLER_NAME)

    formatter = logging.Formatter(
        fmt=settings.log_format,
        datefmt=settings.date_format,
    )

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        if settings.rotate_logs:
            handler: logging.Handler = TimedRotatingFileHandler(
                filename=log_path,
                when="midnight",
                encoding="utf-8",
            )
        else:
            handler = logging.FileHandler(log_path)

        handler.set_name(APP_FILE_HANDLER_NAME)
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(APP_STREAM_HANDLER_NAME)

    handler.setFormatter(formatter)
    handler.setLevel(min_level)
    root_logger.addHandler(handler)

    # Reset common loggers to NOTSET so they inherit from root
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"]:
        logging.getLogger(logger_name).setLevel(logging.NOTSET)

    for logger_name, level in settings.loggers.items():
        logging.getLogger(logger_name).setLevel(level)

    uvicorn_access_logger = logging.getLogger("uvicorn.access")
    uvicorn_access_logger.addFilter(PollingEndpointFilter())
