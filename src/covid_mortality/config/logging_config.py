"""
COVID-19 Mortality Analysis - Centralized Logging Configuration

This module provides centralized logging configuration for the entire project.
Ensures consistent log formatting, levels, and output across all pipeline stages.
"""

import logging
import sys
from typing import Optional

from .constants import LOG_FORMAT, LOG_LEVEL

PACKAGE_LOGGER_NAME = "covid_mortality"


def setup_logger(name: Optional[str] = None, level: Optional[str] = None) -> logging.Logger:
    """
    Set up a pipeline logger.

    Output goes through the root handler installed by configure_logging, so
    records from every stage share one format and one stream.

    Args:
        name: Logger name (defaults to the package logger)
        level: Optional logging level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or PACKAGE_LOGGER_NAME)

    if level is not None:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with standard configuration.

    Args:
        name: Logger name (defaults to the package logger)

    Returns:
        Logger instance
    """
    return setup_logger(name)


def configure_logging(
    level: str = LOG_LEVEL, format_string: str = LOG_FORMAT, suppress_external: bool = True
) -> None:
    """
    Configure logging for the entire application.

    Args:
        level: Global logging level
        format_string: Log message format
        suppress_external: Whether to suppress verbose external library logs
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string,
        stream=sys.stdout,
        force=True,  # Override any existing configuration
    )

    if suppress_external:
        external_loggers = [
            "urllib3.connectionpool",
            "requests.packages.urllib3",
            "matplotlib",
            "PIL",
            "plotly",
        ]

        for logger_name in external_loggers:
            logging.getLogger(logger_name).setLevel(logging.WARNING)


def set_log_level(level: str) -> None:
    """
    Change the logging level for all covid_mortality loggers.

    Args:
        level: New logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(numeric_level)
    for name in logging.root.manager.loggerDict:
        if isinstance(name, str) and name.startswith(PACKAGE_LOGGER_NAME):
            logging.getLogger(name).setLevel(numeric_level)


# Initialize logging when module is imported
configure_logging()
