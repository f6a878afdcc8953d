"""
structlog setup shared by the auth demo service and the pattern catalog CLI.

Both entry points call configure_logging() once at startup with their own
service name, which is stamped on every entry as ``app``. Output always
goes to stderr: the catalog prints demo transcripts on stdout and the
service leaves stdout to uvicorn.

Per-request values such as the correlation ID are bound with
bind_context() and dropped with clear_context(); the service name is not a
context variable, so clearing the context between requests keeps it.
"""

import logging
import sys
from typing import Any, List, Optional

import structlog
from structlog.types import EventDict, Processor

DEFAULT_SERVICE_NAME = "pattern-catalog-auth-demo"


class ServiceContext:
    """Processor adding the service name and deployment environment."""

    def __init__(self, service_name: str, environment: str):
        self.service_name = service_name
        self.environment = environment

    def __call__(self, logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", self.service_name)
        event_dict.setdefault("environment", self.environment)
        return event_dict


def build_processors(service_name: str, environment: str, json_logs: bool) -> List[Processor]:
    """Processor chain ending in a JSON or console renderer."""
    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        ServiceContext(service_name, environment),
        renderer,
    ]


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: Optional[str] = None,
    environment: str = "development",
) -> None:
    """
    Route structlog through the stdlib root logger on stderr.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: One JSON object per line instead of console output
        service_name: Value of the ``app`` field on every entry
        environment: Value of the ``environment`` field on every entry
    """
    structlog.configure(
        processors=build_processors(service_name or DEFAULT_SERVICE_NAME, environment, json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class LoggerMixin:
    """Gives a class a ``logger`` named after the class."""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        return get_logger(self.__class__.__name__)


def bind_context(**kwargs: Any) -> None:
    """Attach key-value pairs to every entry logged in the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
