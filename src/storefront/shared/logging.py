"""Logging for the Storefront API, driven entirely by ``Settings``.

structlog owns the pipeline. Records from stdlib loggers (uvicorn, pymongo,
botocore) are bridged through ``ProcessorFormatter`` so every line shares one
format: JSON in production and staging, a rich console view elsewhere.
Rotating files are written only when ``log_dir`` is configured.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any

import structlog

from storefront.shared.config import Settings

DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

QUIET_LOGGERS = ("urllib3", "botocore", "boto3", "pymongo", "multipart")

_MAX_BYTES = 10 * 1024 * 1024


def resolve_level(settings: Settings) -> str:
    if settings.log_level:
        return settings.log_level.upper()
    return DEFAULT_LEVELS.get(settings.environment.lower(), "INFO")


def uses_json(settings: Settings) -> bool:
    if settings.log_format:
        return settings.log_format.lower() == "json"
    return settings.is_production


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(settings: Settings) -> Any:
    if uses_json(settings):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
    )


def _file_handlers(log_dir: str, formatter: logging.Formatter) -> list[logging.Handler]:
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)

    everything = logging.handlers.RotatingFileHandler(
        path / "storefront.log", maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8"
    )
    errors = logging.handlers.RotatingFileHandler(
        path / "storefront_error.log", maxBytes=_MAX_BYTES, backupCount=5, encoding="utf-8"
    )
    errors.setLevel(logging.ERROR)

    for handler in (everything, errors):
        handler.setFormatter(formatter)
    return [everything, errors]


def configure_logging(settings: Settings) -> None:
    """Install the structlog pipeline and the stdlib bridge for ``settings``.

    Calling it again replaces the handlers, so the app and the CLI can both
    configure logging in the same process.
    """
    level = resolve_level(settings)
    shared = _shared_processors()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(settings),
        ],
    )

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    handlers: list[logging.Handler] = [console]
    if settings.log_dir:
        handlers.extend(_file_handlers(settings.log_dir, formatter))

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request(request_id: str, method: str, path: str) -> None:
    """Start a fresh log context for one HTTP request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def bind_actor(user_id: str, role: str) -> None:
    """Attach the authenticated caller to the current request's log lines."""
    structlog.contextvars.bind_contextvars(user_id=user_id, role=role)
