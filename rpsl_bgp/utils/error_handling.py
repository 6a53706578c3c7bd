#!/usr/bin/env python3
"""
RPSL BGP Error Handling Utilities

Provides the exception taxonomy, standardized error formatting, parameter
validation, and user guidance for consistent error reporting across the
RPSL BGP application.

Error Format Standards:
- INFO: "✓ {message}"                    # Success messages
- WARNING: "⚠ {message}"                 # Warning messages
- ERROR: "✗ {message}"                   # Error messages
- FATAL: "✗ Fatal: {message}"            # Critical errors
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Union, Dict
from functools import wraps


class ErrorSeverity:
    """Error severity levels for consistent classification"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class RpslBgpError(Exception):
    """Base exception class for RPSL BGP with standardized error handling"""

    def __init__(self, message: str, severity: str = ErrorSeverity.ERROR,
                 guidance: Optional[str] = None, technical_details: Optional[str] = None):
        self.message = message
        self.severity = severity
        self.guidance = guidance
        self.technical_details = technical_details
        super().__init__(message)


class ValidationError(RpslBgpError):
    """Raised when parameter validation fails"""

    def __init__(self, message: str, parameter: str = None, guidance: str = None):
        self.parameter = parameter
        super().__init__(message, ErrorSeverity.ERROR, guidance)


class ConfigurationError(RpslBgpError):
    """Raised when configuration is invalid or missing"""
    pass


class ObjectParseError(RpslBgpError):
    """Raised when an RPSL object is structurally invalid and cannot be built"""

    def __init__(self, message: str, object_text: Optional[str] = None):
        self.object_text = object_text
        super().__init__(message, ErrorSeverity.ERROR,
                         "Check the object's attribute syntax and mandatory attributes",
                         object_text)


class AttributeParseError(RpslBgpError):
    """Raised when a single attribute value cannot be parsed"""

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message, ErrorSeverity.ERROR, technical_details=value)


class ErrorFormatter:
    """Centralized error message formatting with consistent symbols and styles"""

    SYMBOLS = {
        ErrorSeverity.INFO: "✓",
        ErrorSeverity.WARNING: "⚠",
        ErrorSeverity.ERROR: "✗",
        ErrorSeverity.FATAL: "✗ Fatal:"
    }

    @classmethod
    def format_message(cls, message: str, severity: str = ErrorSeverity.ERROR,
                       guidance: Optional[str] = None) -> str:
        """Format a message with the appropriate symbol and structure"""
        symbol = cls.SYMBOLS.get(severity, "•")
        formatted = f"{symbol} {message}"

        if guidance:
            formatted += f"\n  Suggestion: {guidance}"

        return formatted

    @classmethod
    def format_error(cls, error: Union[Exception, RpslBgpError],
                     hide_technical: bool = True) -> str:
        """Format an exception with appropriate level of detail"""
        if isinstance(error, RpslBgpError):
            formatted = cls.format_message(error.message, error.severity, error.guidance)
            if not hide_technical and error.technical_details:
                formatted += f"\n  Technical: {error.technical_details}"
            return formatted

        error_type = type(error).__name__
        message = str(error)

        if isinstance(error, FileNotFoundError):
            guidance = "Check that the file path is correct and the file exists"
            return cls.format_message(f"File not found: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, PermissionError):
            guidance = "Check file permissions or run with appropriate privileges"
            return cls.format_message(f"Permission denied: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, UnicodeDecodeError):
            guidance = "RPSL input must be UTF-8 or ASCII text"
            return cls.format_message(f"Cannot decode input: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, ValueError):
            guidance = "Verify input parameters and try again"
            return cls.format_message(f"Invalid input: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, KeyboardInterrupt):
            return cls.format_message("Operation interrupted by user", ErrorSeverity.WARNING)
        else:
            if hide_technical:
                return cls.format_message("Unexpected error occurred", ErrorSeverity.ERROR,
                                          "Check logs for details or run with --verbose")
            else:
                return cls.format_message(f"Unexpected {error_type}: {message}",
                                          ErrorSeverity.ERROR)


class ParameterValidator:
    """Parameter validation with range checks and user guidance"""

    @staticmethod
    def validate_file_exists(file_path: Union[str, Path], parameter_name: str = "file") -> Path:
        """Validate that a file exists and is readable"""
        path = Path(file_path)

        if not path.exists():
            raise ValidationError(
                f"File does not exist: {path}",
                parameter_name,
                "Check the file path and ensure the file exists"
            )

        if not path.is_file():
            raise ValidationError(
                f"Path is not a file: {path}",
                parameter_name,
                "Provide a path to a file, not a directory"
            )

        if not os.access(path, os.R_OK):
            raise ValidationError(
                f"Cannot read file: {path}",
                parameter_name,
                "Check file permissions or run with appropriate privileges"
            )

        return path

    @staticmethod
    def validate_output_path(file_path: Union[str, Path], parameter_name: str = "output") -> Path:
        """Validate that an output file can be created"""
        path = Path(file_path)

        if path.exists() and path.is_dir():
            raise ValidationError(
                f"Output path is a directory: {path}",
                parameter_name,
                "Provide a path to a file, not a directory"
            )

        parent = path.parent if str(path.parent) else Path(".")
        if not parent.exists():
            raise ValidationError(
                f"Output directory does not exist: {parent}",
                parameter_name,
                "Create the directory first or choose a different location"
            )

        return path

    @staticmethod
    def parse_key_value_pairs(pairs, parameter_name: str = "-m") -> Dict[str, str]:
        """Parse repeated key=value CLI parameters into a dictionary"""
        result = {}
        for pair in pairs or []:
            key, sep, value = pair.partition("=")
            if not sep or not key.strip():
                raise ValidationError(
                    f"Malformed parameter '{pair}'",
                    parameter_name,
                    "Use the syntax -m key=value"
                )
            result[key.strip()] = value.strip()
        return result


def handle_errors(logger_name: str = None, hide_technical: bool = True):
    """Decorator for standardized error handling in command functions"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(logger_name or f'rpsl-bgp.{func.__name__}')

            try:
                return func(*args, **kwargs)
            except RpslBgpError as e:
                logger.error(f"{e.severity.title()} in {func.__name__}: {e.message}")
                print(ErrorFormatter.format_error(e, hide_technical), file=sys.stderr)

                if e.severity == ErrorSeverity.FATAL:
                    return 2
                elif e.severity == ErrorSeverity.ERROR:
                    return 1
                else:
                    return 0

            except KeyboardInterrupt:
                logger.info(f"Command {func.__name__} interrupted by user")
                print(ErrorFormatter.format_message("Operation interrupted by user",
                                                    ErrorSeverity.WARNING), file=sys.stderr)
                return 130

            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}")
                print(ErrorFormatter.format_error(e, hide_technical), file=sys.stderr)
                return 1

        return wrapper
    return decorator


def print_success(message: str):
    """Print a success message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.INFO), file=sys.stderr)


def print_warning(message: str, guidance: str = None):
    """Print a warning message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.WARNING, guidance), file=sys.stderr)


def print_error(message: str, guidance: str = None):
    """Print an error message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.ERROR, guidance), file=sys.stderr)


def validate_common_args(args):
    """Validate common command-line arguments"""
    validator = ParameterValidator()

    if getattr(args, 'input', None):
        validator.validate_file_exists(args.input, "input")

    if getattr(args, 'output', None):
        validator.validate_output_path(args.output, "output")

    if getattr(args, 'config', None):
        validator.validate_file_exists(args.config, "config")

    return args


__all__ = [
    'ErrorSeverity', 'RpslBgpError', 'ValidationError', 'ConfigurationError',
    'ObjectParseError', 'AttributeParseError',
    'ErrorFormatter', 'ParameterValidator', 'handle_errors',
    'print_success', 'print_warning', 'print_error',
    'validate_common_args'
]
