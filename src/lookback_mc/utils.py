"""
utils.py
--------
Logging, timing decorators, and shared helper functions.
"""

import os
import logging
import time
import functools
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import CONFIG

PACKAGE_LOGGER = "lookback_mc"

_FORMAT = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _configure_package_logger(log_dir: Optional[str], level: str) -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if root.handlers:            # avoid duplicate handlers on re-import
        return root

    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.propagate = False

    # Console handler; stdout is reserved for host output
    ch = logging.StreamHandler()
    ch.setFormatter(_FORMAT)
    root.addHandler(ch)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file = os.path.join(
            log_dir, f"lookback_mc_{datetime.now().strftime('%Y%m%d')}.log"
        )
        fh = logging.FileHandler(log_file)
        fh.setFormatter(_FORMAT)
        root.addHandler(fh)

    return root


def get_logger(name: str, log_dir: Optional[str] = None,
               level: Optional[str] = None) -> logging.Logger:
    """
    Return a named logger below the package logger.

    The package logger is configured once, on first use, with a stderr
    handler and, when a log directory is given (argument or
    ``LOOKBACK_LOG_DIR``), a daily log file.

    Parameters
    ----------
    name    : Logger name (typically the module __name__).
    log_dir : Directory for log files; None keeps console output only.
    level   : Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").

    Returns
    -------
    logging.Logger
    """
    _configure_package_logger(log_dir or CONFIG.log_dir, level or CONFIG.log_level)
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")


def set_log_level(level: str) -> None:
    """Change the verbosity of every engine logger at once."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(
        getattr(logging, level.upper(), logging.WARNING)
    )


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper


def format_decimal(value: float, precision: Optional[int] = None) -> str:
    """Fixed-point rendering used for host output."""
    digits = CONFIG.output.precision if precision is None else precision
    return f"{value:.{digits}f}"
