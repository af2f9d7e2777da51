"""
Enhanced structlog-based logging configuration for the Adaptation Survival server.

This is the main entry point for the logging system. All application modules
obtain their loggers through get_logger() so that every entry passes through
the same sanitizing and context-merging processors.

CORRECT USAGE:
    from ..structured_logging.enhanced_logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Creature created", creature_id=creature.id)
"""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

from .logging_processors import sanitize_sensitive_data

logger = structlog.get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class _LoggingState:
    """Whether setup_enhanced_logging already ran, and with which config."""

    initialized: bool = False
    signature: str | None = None


_logging_state = _LoggingState()


def _setup_stdlib_handlers(log_level: str, log_file: str | None) -> None:
    """Attach a console handler, and optionally a rotating file handler, to the root logger."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter("%(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def configure_enhanced_structlog(
    log_level: str = "INFO",
    log_format: str = "key_value",
    log_file: str | None = None,
    disable_logging: bool = False,
) -> None:
    """
    Configure structlog with context merging and security sanitization.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "key_value" for human readable lines, "json" for machine ingestion
        log_file: Optional path of a rotating log file
        disable_logging: When True only CRITICAL records are emitted
    """
    base_processors: list[Any] = [
        # Redaction must see the raw event before anything is rendered
        sanitize_sensitive_data,
        # Merge request context variables (request_id, method, path)
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event", "logger"])

    _setup_stdlib_handlers("CRITICAL" if disable_logging else log_level, None if disable_logging else log_file)

    structlog.configure(
        processors=base_processors + [renderer],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )


def setup_enhanced_logging(config: dict[str, Any], *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from the "logging" section of the legacy config dictionary.

    Repeated calls are no-ops unless force_reconfigure is set, so importing
    the application twice (uvicorn reload, tests) does not stack handlers.

    Args:
        config: Server configuration dictionary (AppConfig.to_legacy_dict())
        force_reconfigure: When True, tear down existing handlers before reconfiguring
    """
    config_signature = json.dumps(config, sort_keys=True, default=str)

    if _logging_state.initialized and not force_reconfigure:
        get_logger("adaptation_server.structured_logging.setup").debug(
            "Logging already configured, skipping setup",
            config_signature=_logging_state.signature,
        )
        return

    logging_config = config.get("logging", {})
    log_level = str(logging_config.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        log_level = "INFO"

    configure_enhanced_structlog(
        log_level=log_level,
        log_format=logging_config.get("format", "key_value"),
        log_file=logging_config.get("log_file"),
        disable_logging=logging_config.get("disable_logging", False),
    )
    _configure_enhanced_uvicorn_logging()

    get_logger("adaptation_server.structured_logging.enhanced").info(
        "Logging configured",
        environment=logging_config.get("environment"),
        log_level=log_level,
        log_format=logging_config.get("format", "key_value"),
    )

    _logging_state.initialized = True
    _logging_state.signature = config_signature


def _configure_enhanced_uvicorn_logging() -> None:
    """Route uvicorn's loggers through the root handlers configured above."""
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def bind_request_context(**context: Any) -> None:
    """Bind request-scoped values (request_id, method, path) into every subsequent log entry."""
    bind_contextvars(**{key: value for key, value in context.items() if value is not None})


def clear_request_context() -> None:
    """Clear request-scoped log context."""
    clear_contextvars()


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Return a structlog logger bound to name.

    Application modules call this rather than structlog.get_logger() so the
    import path stays the same if the processor chain changes.
    """
    return structlog.get_logger(name)
