"""Centralized logging configuration module"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Whether already initialized
_initialized = False

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(name)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 3


def _write_session_separator(log_file: Path) -> None:
    with open(log_file, 'a', encoding='utf-8') as f:
        f.write("\n" + "=" * 100 + "\n")
        f.write(f"Server started at: {datetime.now().strftime(LOG_DATE_FORMAT)}\n")
        f.write("=" * 100 + "\n\n")


def setup_logging(logs_dir: Optional[Path] = None, level: str = "INFO") -> Path:
    """Configure console and rotating file logging once per process.

    Args:
        logs_dir: Directory for server.log (defaults to ./logs)
        level: Root log level name

    Returns:
        Path of the active log file
    """
    global _initialized

    logs_dir = Path(logs_dir or "logs")
    log_file = logs_dir / "server.log"

    if _initialized:
        return log_file

    logs_dir.mkdir(parents=True, exist_ok=True)
    _write_session_separator(log_file)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8',
    )
    file_handler.setFormatter(formatter)

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=numeric_level,
        handlers=[console_handler, file_handler],
        force=True
    )

    logging.getLogger('src').setLevel(numeric_level)

    # Reduce log level for third-party libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('openai').setLevel(logging.WARNING)

    _initialized = True

    logging.getLogger(__name__).info(
        "Logging initialized: %s (max 10MB per file, keep %s backups)",
        log_file.absolute(),
        BACKUP_COUNT,
    )
    return log_file
