"""
Logging configuration utilities for the OMI demo client.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGERS = ['src.omi']

MESSAGE_ONLY_FORMAT = '%(message)s'


def setup_logger(
    name: str,
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> logging.Logger:
    """
    Set up a logger that writes to stdout with consistent formatting.

    Args:
        name: Logger name
        level: Logging level
        format_string: Custom format string
        include_timestamp: Whether to include timestamp in logs

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Reuse the existing handler, pointed at the current stdout
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(sys.stdout)
            handler.setLevel(level)
            if format_string is not None:
                handler.setFormatter(logging.Formatter(format_string))
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if format_string is None:
        if include_timestamp:
            format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        else:
            format_string = '%(name)s - %(levelname)s - %(message)s'

    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    return logger


def configure_cli_logging(verbose: bool) -> logging.Logger:
    """
    Configure the package logger for command line use.

    Verbose runs print INFO trace lines as bare messages; otherwise only
    warnings and errors are shown.
    """
    level = logging.INFO if verbose else logging.WARNING
    return setup_logger(PACKAGE_LOGGERS[0], level=level, format_string=MESSAGE_ONLY_FORMAT)


def set_global_log_level(level: int) -> None:
    """
    Set the global logging level for all loggers.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO)
    """
    logging.getLogger().setLevel(level)

    for logger_name in PACKAGE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)


def configure_debug_logging() -> None:
    """Configure debug-level logging for development."""
    set_global_log_level(logging.DEBUG)

    debug_format = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'

    for logger_name in PACKAGE_LOGGERS:
        for handler in logging.getLogger(logger_name).handlers:
            handler.setFormatter(logging.Formatter(debug_format))


def silence_external_loggers() -> None:
    """Silence noisy external library loggers."""
    logging.getLogger('win32com').setLevel(logging.WARNING)
    logging.getLogger('rich').setLevel(logging.WARNING)
    logging.getLogger('markdown_it').setLevel(logging.WARNING)
