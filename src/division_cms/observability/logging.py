"""
division_cms.observability.logging

structlog setup shared by the API process and tests.

Every event carries the request context bound in `observability.middleware`
(request id, path, method) and, on the admin surface, `action`, `target_id`
and `admin_id`. Token material never reaches the output: any event key naming
a credential is masked before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, Processor

CREDENTIAL_KEYS = frozenset({"token", "admin_token", "x-admin-token", "secret", "signature"})


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            *_context_processors(service_name),
            mask_credentials,
            structlog.processors.dict_tracebacks if json_logs else _passthrough,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def _context_processors(service_name: str) -> list[Processor]:
    def stamp_service(_: Any, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        stamp_service,
    ]


def _passthrough(_: Any, __: str, event_dict: EventDict) -> EventDict:
    return event_dict


def mask_credentials(_: Any, __: str, event_dict: EventDict) -> EventDict:
    for key in CREDENTIAL_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)
