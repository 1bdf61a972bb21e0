"""
Logging configuration for vafboot.

Provides logger setup plus timing helpers used around the resampling run.
"""

import functools
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional

LOGGER_NAME = "vafboot"


class PerformanceLogger:
    """Context manager for performance monitoring."""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            duration = time.perf_counter() - self.start_time
            if exc_type is None:
                self.logger.info(f"Completed {self.operation} in {duration:.3f}s")
            else:
                self.logger.error(f"Failed {self.operation} after {duration:.3f}s: {exc_val}")
        return False


def time_it(operation: str = None):
    """Decorator for automatic performance logging."""
    def decorator(func: Callable) -> Callable:
        op_name = operation or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            logger = logging.getLogger(func.__module__)
            with PerformanceLogger(logger, op_name):
                return func(*args, **kwargs)
        return wrapper
    return decorator


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True,
    format_string: Optional[str] = None
) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console_output: Whether to log to stderr
        format_string: Custom format string

    Returns:
        Configured logger instance
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter(format_string)

    # stdout is reserved for command output
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def log_system_info(logger: logging.Logger) -> None:
    """Log interpreter and numeric stack versions for reproducibility."""
    import platform

    import numpy
    import pandas
    import scipy

    logger.info(f"Platform: {platform.platform()}")
    logger.info(f"Python: {sys.version.split()[0]}")
    logger.info(f"NumPy {numpy.__version__}, Pandas {pandas.__version__}, SciPy {scipy.__version__}")


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger instance with default configuration."""
    return logging.getLogger(name)
