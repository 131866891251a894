import os
import sys
from datetime import datetime
from typing import Any

from loguru import logger
from loguru._logger import Logger

from cinema_api.core.config import settings

# (file name, level, retention); None keeps the files until removed by hand
FILE_SINKS: list[tuple[str, str, str | None]] = [
    ("error.log", "ERROR", "30 days"),
    ("info.log", "INFO", None),
]
DEBUG_FILE_SINKS: list[tuple[str, str, str | None]] = [
    ("trace.log", "TRACE", "3 days"),
    ("debug.log", "DEBUG", "7 days"),
]

CONSOLE_FORMAT = (
    "[<green>{time:HH:mm:ss}</green>] <level>[{level}]</level> "
    "{module}:{function}:<blue>{line}</blue> - {message}\n"
)


def file_formatter(record: Any) -> str:
    line = "[{time:HH:mm:ss}] [{level}] {module}:{function}:{line} - {message}"

    extras = record.get("extra", {})
    if extras:
        line += " (" + ", ".join(f"{key}={value}" for key, value in extras.items()) + ")"
    line += "\n"

    if record["exception"]:
        line += "{exception}"
    return line


def console_formatter(record: Any) -> str:
    if record["exception"]:
        return CONSOLE_FORMAT + "{exception}"
    return CONSOLE_FORMAT


def setup_logger(name: str, log_dir: str | None = None) -> Logger:
    """
    Send logs to stderr and to daily rotated files under <log_dir>/<date>/<name>.
    Debug and trace files are only written when settings.DEBUG is set.
    """
    today = datetime.now().strftime("%Y-%m-%d")
    log_path = os.path.join(log_dir or settings.LOG_DIR, today, name)
    os.makedirs(log_path, exist_ok=True)

    logger.remove()

    sinks = FILE_SINKS + DEBUG_FILE_SINKS if settings.DEBUG else FILE_SINKS
    for file_name, level, retention in sinks:
        logger.add(
            os.path.join(log_path, file_name),
            format=file_formatter,
            level=level,
            rotation="00:00",  # Midnight
            retention=retention,
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )

    logger.add(
        sys.stderr,
        format=console_formatter,
        level="DEBUG" if settings.DEBUG else "INFO",
        enqueue=True,
        backtrace=True,
        diagnose=True,
        colorize=True,
    )

    return logger  # type: ignore
