"""
Logging configuration using Loguru.

Console output is always on; a rotating JSON log file is added when a log
directory is given.
"""
import sys
import uuid
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(verbose: bool = False, log_dir: Optional[str] = None, run_id: Optional[str] = None):
    """
    Configure Loguru logger with console and (optional) file handlers.

    Args:
        verbose: If True, set console level to DEBUG
        log_dir: Directory for sheetmerge.log; no file handler when None
        run_id: Identifier bound to every record; generated when None

    Returns:
        Logger bound with the run id
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        colorize=True,
    )

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        logger.add(
            path / "sheetmerge.log",
            level="DEBUG",
            format="{time} {level} {message}",
            rotation="10 MB",
            retention="30 days",
            serialize=True,
        )

    return logger.bind(run_id=run_id or uuid.uuid4().hex[:8])
