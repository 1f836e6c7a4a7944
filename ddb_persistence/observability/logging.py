from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

COMPONENT = "ddb_persistence"

_CONFIGURED = False


def _drop_none_fields(_: Any, __: str, event_dict: dict) -> dict:
    # Adapter events pass optional fields (e.g. partition_key) that are often None.
    return {k: v for k, v in event_dict.items() if v is not None}


def _add_component(_: Any, __: str, event_dict: dict) -> dict:
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_component,
        _drop_none_fields,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def configure_logging(*, level: str | int = "INFO") -> None:
    """
    Route structlog and stdlib records through one JSON handler on stdout.

    Only the first call takes effect, so `from_settings()` can call it freely.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_shared_processors(),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level if isinstance(level, int) else str(level).upper())

    for name in ("botocore", "boto3", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None):
    return structlog.get_logger(name)
