"""
Root logger wiring for the vosksrt command line.

Records always reach the console. Once the configuration names a log
directory and file they are also kept in a size-rotated file there; leaving
either setting empty keeps logging console-only.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

from .exceptions import FileSystemError
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
MAX_LOG_BYTES = 10 * 1024 * 1024 # 10 MB
LOG_BACKUPS = 5


def _replace_handlers(root: logging.Logger, handlers: Iterable[logging.Handler]) -> None:
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)


def _open_log_file(log_dir: str, log_path: str, max_bytes: int, backup_count: int) -> Optional[RotatingFileHandler]:
    try:
        ensure_dir_exists(log_dir)
        return RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8')
    except (FileSystemError, OSError) as e:
        logger.warning(f"File logging disabled, cannot write {log_path}: {e}")
        return None


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[str] = "logs",
    log_file: Optional[str] = "vosksrt.log",
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = LOG_BACKUPS
) -> Optional[str]:
    """
    (Re)configures the root logger.

    Any handlers from an earlier call are closed and replaced, so the CLI can
    start console-only and add the log file after the config has loaded.
    A log location that cannot be created or opened only costs the file
    output; it is reported on the console and the run goes on.

    Args:
        log_level: Minimum level for every handler.
        log_dir: Directory for the log file. Empty or None disables file logging.
        log_file: Log file name inside log_dir. Empty or None disables file logging.
        max_bytes: Size at which the log file is rotated.
        backup_count: Number of rotated files to keep.

    Returns:
        Path of the log file being written, or None when logging only to the console.
    """
    root = logging.getLogger()
    root.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    _replace_handlers(root, [console])

    if not log_dir or not log_file:
        return None

    log_path = os.path.join(log_dir, log_file)
    file_handler = _open_log_file(log_dir, log_path, max_bytes, backup_count)
    if file_handler is None:
        return None
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    logger.debug(f"Logging to file {log_path}")
    return log_path
