"""
Structured logging for streamlocate using structlog.

Library code only asks for loggers; applications embedding streamlocate
decide whether to call configure_logging() and how output is rendered.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag log entries with the library name."""
    event_dict["app"] = "streamlocate"
    return event_dict


def _build_handler(log_output: str) -> logging.Handler:
    if log_output == "stdout":
        return logging.StreamHandler(sys.stdout)
    if log_output == "stderr":
        return logging.StreamHandler(sys.stderr)
    return logging.FileHandler(log_output, mode="a", encoding="utf-8")


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_output: str = "stderr",
) -> None:
    """
    Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_output: Output destination (stdout, stderr, or file path)

    Raises:
        ValueError: If log_level or log_format is unknown
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")
    if log_format not in ("json", "console"):
        raise ValueError(f"Unknown log format: {log_format}")

    # force=True closes the handlers installed by a previous call.
    logging.basicConfig(
        format="%(message)s",
        handlers=[_build_handler(log_output)],
        level=level,
        force=True,
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_app_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_config(config: Any) -> None:
    """
    Configure logging from the ``logging`` section of a Config.

    Args:
        config: streamlocate.utils.config.Config instance
    """
    configure_logging(
        log_level=config.get("logging.level", "INFO"),
        log_format=config.get("logging.format", "json"),
        log_output=config.get("logging.output", "stderr"),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        structlog logger
    """
    return structlog.get_logger(name)
