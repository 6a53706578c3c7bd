#!/usr/bin/env python3
"""
Centralized Logging Configuration for RPSL BGP

Provides standardized logging setup with:
- Console and file output
- Configurable log levels
- Structured log formatting
- Performance monitoring
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional
import functools
import time


class RpslFormatter(logging.Formatter):
    """Custom formatter for RPSL BGP with enhanced structure"""

    # Color codes for console output
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_module: bool = True,
                 date_format: str = "%Y-%m-%d %H:%M:%S", fmt: Optional[str] = None):
        """
        Initialize formatter

        Args:
            use_colors: Use ANSI color codes for console output
            include_module: Include module name in log output
            date_format: strftime format for timestamps
            fmt: Record format string, replaces the built-in one when given
        """
        self.use_colors = use_colors and sys.stderr.isatty()
        self.include_module = include_module

        if fmt:
            format_str = fmt
        elif include_module:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        super().__init__(fmt=format_str, datefmt=date_format)

    def format(self, record):
        """Format log record with optional colors"""
        formatted = super().format(record)

        if hasattr(record, "duration"):
            formatted = f"{formatted} [took {record.duration:.3f}s]"

        if self.use_colors and record.levelname in self.COLORS:
            color = self.COLORS[record.levelname]
            formatted = f"{color}{formatted}{self.RESET}"

        return formatted


class RpslLogger:
    """Enhanced logger for RPSL BGP operations"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def time_operation(self, operation_name: str = None):
        """
        Decorator to time and log operation duration

        Args:
            operation_name: Custom name for the operation
        """

        def decorator(func):
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                op_name = operation_name or f"{self.name}.{func.__name__}"
                start_time = time.time()

                self.logger.debug(f"Starting {op_name}")

                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    self.logger.error(
                        f"Failed {op_name}: {e}",
                        extra={"duration": time.time() - start_time},
                    )
                    raise

                self.logger.info(
                    f"Completed {op_name}",
                    extra={"duration": time.time() - start_time},
                )
                return result

            return wrapper

        return decorator

    def debug(self, msg, *args, **kwargs):
        return self.logger.debug(msg, *args, **kwargs)

    def info(self, msg, *args, **kwargs):
        return self.logger.info(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        return self.logger.warning(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        return self.logger.error(msg, *args, **kwargs)

    def exception(self, msg, *args, **kwargs):
        return self.logger.exception(msg, *args, **kwargs)


def setup_logging(
    config=None,
    level: str = None,
    log_to_file: bool = None,
    log_file: str = None,
    console_colors: bool = None,
    include_modules: bool = True,
) -> Dict[str, logging.Handler]:
    """
    Setup centralized logging for RPSL BGP

    Args:
        config: RpslBgpConfig instance (its logging section is used)
        level: Log level override
        log_to_file: Enable file logging override
        log_file: Log file path override
        console_colors: Use colors in console output
        include_modules: Include module names in log format

    Returns:
        Dictionary of configured handlers
    """
    logging_config = config.logging if config is not None else None

    if level is None:
        level = logging_config.level if logging_config else "INFO"
    if log_to_file is None:
        log_to_file = logging_config.log_to_file if logging_config else False
    if log_file is None:
        log_file = logging_config.log_file if logging_config else None
    if console_colors is None:
        console_colors = logging_config.console_colors if logging_config else True
    date_format = logging_config.date_format if logging_config else "%Y-%m-%d %H:%M:%S"
    log_format = logging_config.format if logging_config else None

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = {}

    # Console handler; stdout is reserved for emitter output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(RpslFormatter(
        use_colors=console_colors, include_module=include_modules, date_format=date_format,
        fmt=log_format,
    ))
    root_logger.addHandler(console_handler)
    handlers["console"] = console_handler

    if log_to_file and log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(RpslFormatter(
            use_colors=False, include_module=True, date_format=date_format,
            fmt=log_format,
        ))
        root_logger.addHandler(file_handler)
        handlers["file"] = file_handler

    logger = logging.getLogger("rpsl-bgp.logging")
    logger.debug(f"Logging configured: level={level}, handlers={list(handlers.keys())}")

    return handlers


def get_logger(name: str) -> RpslLogger:
    """
    Get enhanced RPSL BGP logger

    Args:
        name: Logger name (typically __name__)

    Returns:
        RpslLogger instance
    """
    return RpslLogger(name)


class LoggingTimer:
    """Context manager for timing operations with logging"""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time

        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {duration:.3f}s")
        else:
            self.logger.error(f"Failed {self.operation} after {duration:.3f}s: {exc_val}")

        return False  # Don't suppress exceptions
