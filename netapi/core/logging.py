"""
Centralized Logging.

structlog on top of the standard library root logger. Library modules call
get_logger(__name__) and log with keyword fields; applications (the CLI)
call setup_logging() once to pick level and output format.

Defaults come from config/settings/logging.yaml:

    level: "INFO"
    format: "console"      # or "json"
    handlers:
      console:
        enabled: true
      file:
        enabled: false
        filename: "netapi.log"
        max_bytes: 10485760
        backup_count: 5

Usage:
    from netapi.core.logging import get_logger, log_with_source

    logger = get_logger(__name__)
    log_with_source(logger, "client", "debug", "Dispatching call", fun="test.ping")
"""

import logging
import logging.handlers
from typing import Any

import structlog
import yaml

from netapi.core.config import find_project_root, get_settings_dir

LOG_SOURCES = {"client", "transport", "codec", "cli", "internal", "unknown"}

_logging_config: dict[str, Any] | None = None


def _load_logging_config() -> dict[str, Any]:
    """Load logging.yaml from the settings directory and cache it."""
    global _logging_config

    config_path = get_settings_dir() / "logging.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Logging configuration not found: {config_path} (expected logging.yaml)")

    with open(config_path) as f:
        _logging_config = yaml.safe_load(f) or {}
    return _logging_config


def _get_logging_config() -> dict[str, Any]:
    """Return the cached logging configuration, loading it on first use."""
    if _logging_config is None:
        return _load_logging_config()
    return _logging_config


def _get_logs_dir():
    logs_dir = find_project_root() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.ExtraAdder(),
    ]


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Explicit arguments override the values from logging.yaml.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format_type: "console" for human-readable output, "json" for one JSON object per line
        enable_file_logging: Also write to a rotating file under logs/
    """
    try:
        config = _get_logging_config()
    except FileNotFoundError:
        # Installed without the settings directory; built-in defaults apply.
        config = {}
    handlers_config = config.get("handlers", {})
    file_config = handlers_config.get("file", {})

    level = (level or config.get("level", "INFO")).upper()
    format_type = format_type or config.get("format", "console")
    if enable_file_logging is None:
        enable_file_logging = file_config.get("enabled", False)

    shared_processors = _shared_processors()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if format_type == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    if handlers_config.get("console", {}).get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        # Files always get JSON, whatever the console shows.
        file_formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
        file_handler = logging.handlers.RotatingFileHandler(
            _get_logs_dir() / file_config.get("filename", "netapi.log"),
            maxBytes=file_config.get("max_bytes", 10485760),
            backupCount=file_config.get("backup_count", 5),
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if level == "DEBUG" else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to the given module name."""
    return structlog.get_logger(name)


def log_with_source(
    logger: Any,
    source: str,
    level: str,
    message: str,
    **kwargs: Any,
) -> None:
    """
    Log with an explicit source field.

    Args:
        logger: structlog logger
        source: One of LOG_SOURCES; anything else is logged as "unknown"
        level: Method name on the logger (debug, info, warning, error, critical)
        message: Event message
        **kwargs: Additional structured fields
    """
    if source not in LOG_SOURCES:
        source = "unknown"
    log_method = getattr(logger, level)
    log_method(message, source=source, **kwargs)
