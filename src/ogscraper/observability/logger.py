"""Structured logging for observability."""

from __future__ import annotations

import logging

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ..config.settings import OgsSettings, get_settings

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def add_service_name(service_name: str) -> Processor:
    """Stamp every event with the configured service name (unless already bound)."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def build_processors(settings: OgsSettings) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        add_service_name(settings.service_name),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(settings: OgsSettings | None = None) -> None:
    """Configure JSON logging for the ``ogscraper`` loggers from ``OGS_*`` settings."""
    settings = settings or get_settings()
    log_level = _LEVELS.get(settings.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
