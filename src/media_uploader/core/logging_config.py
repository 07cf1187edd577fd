"""Centralized logging configuration for the media uploader."""

import os
import sys
import logging
from typing import Optional, TextIO

# Loggers the processors and the CLI write their progress banners to
CLI_LOGGER_NAMES = ("uploader", "asyncio-uploader")


def setup_logger(
    name: str = "media-uploader",
    level: Optional[str] = None,
    format_type: str = "structured",
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Setup centralized logging with environment variable configuration.

    The level is applied when the logger is first configured or when
    `level` is passed explicitly; later lookups keep whatever level was set.

    Args:
        name: Logger name (defaults to "media-uploader")
        level: Log level override (defaults to env var or INFO)
        format_type: Logging format ("structured" or "simple")
        stream: Output stream; new handlers default to stdout, existing
            handlers are re-pointed when given

    Returns:
        Configured logger instance

    Environment Variables:
        LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        LOG_FORMAT: Set format type ("structured" or "simple")
    """
    logger = logging.getLogger(name)
    first_setup = not logger.handlers

    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    elif first_setup:
        env_level = os.getenv("LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, env_level, logging.INFO))

    if first_setup:
        handler = logging.StreamHandler(stream or sys.stdout)

        env_format = os.getenv("LOG_FORMAT", format_type).lower()

        if env_format == "structured":
            formatter = logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)-8s | "
                "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )

        handler.setFormatter(formatter)
        logger.addHandler(handler)
    elif stream is not None:
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(stream)

    logger.propagate = False
    return logger


def get_logger(name: str = "media-uploader") -> logging.Logger:
    """
    Get a logger instance with consistent configuration.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return setup_logger(name)


def configure_cli_logging(
    debug: bool = False, stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Send the processor loggers to stderr so stdout carries only command output.

    With `debug` the processor loggers drop to DEBUG; the root logger is left
    alone so third-party libraries keep their own levels.

    Returns:
        The "uploader" logger
    """
    stream = stream or sys.stderr
    level = "DEBUG" if debug else None
    loggers = [setup_logger(name, level=level, stream=stream) for name in CLI_LOGGER_NAMES]
    return loggers[0]


logger = setup_logger()
