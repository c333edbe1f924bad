import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

from rich.logging import RichHandler

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: LogLevel = "INFO",
    log_file: Path | str | None = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
) -> None:
    """Configure logging for the application.

    Console output goes through rich; a rotating log file is added when
    ``log_file`` is given.

    Args:
        level: The minimum logging level to capture.
        log_file: The path to the log file, or None for console only.
        max_bytes: The maximum size of the log file before rotation.
        backup_count: The number of backup log files to keep.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Drop handlers from an earlier call so messages are not duplicated
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = RichHandler(
        level=log_level,
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=False,  # Clip text may contain square brackets
    )
    console_handler.setFormatter(logging.Formatter("%(name)s - %(message)s", datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if not log_file:
        logger.debug("File logging skipped as no log_file was provided.")
        return

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except OSError:
        # Keep console logging even if the file cannot be opened
        logger.error("Failed to set up file logging to %s", log_file, exc_info=True)
        return

    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)
    logger.debug("Added RotatingFileHandler for file: %s", log_file)
