"""Structured logging configuration."""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager

import structlog


def setup_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog; JSON lines by default, console rendering for local runs."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ],
            ),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def bind_reconcile_context(
    namespace: str, config_name: str, correlation_id: str = ""
) -> AbstractContextManager[None]:
    """Bind the workload identity to log lines emitted inside the ``with`` block."""
    return structlog.contextvars.bound_contextvars(
        namespace=namespace,
        config_name=config_name,
        correlation_id=correlation_id,
    )
