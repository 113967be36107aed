# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Modules log through the standard library (logging.getLogger(__name__)).
setup_logging() installs a single stdout handler whose formatter runs those
records through structlog, so values bound with bind_context() (request_id,
action) appear on every line. Output is JSON outside development and
colored console output in development.

Example:
    >>> from intervention_tracker.utils.logging import setup_logging
    >>> from intervention_tracker.core.config import get_settings
    >>> setup_logging(get_settings())
"""

import logging
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from intervention_tracker.core.config.settings import Settings

SENSITIVE_KEYS = ("password", "token", "secret", "authorization", "api_key")
MASK = "[REDACTED]"

NOISY_LOGGERS = ("uvicorn.access", "httpx", "sqlalchemy.engine", "aiosqlite", "asyncio")


def setup_logging(settings: "Settings") -> None:
    """Route standard library and structlog output through one handler.

    Calling it again replaces the handler installed by the previous call.

    Args:
        settings: Application settings; log_level, debug and environment
            are read.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    console = settings.is_development or settings.debug

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        if console
        else structlog.processors.JSONRenderer()
    )
    final: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if not console:
        final.append(structlog.processors.format_exc_info)
    final.append(renderer)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=final)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


def sanitize_for_logging(params: Any) -> Any:
    """Mask sensitive values in a structure before it is logged.

    Keys containing any of SENSITIVE_KEYS are replaced with a mask. A
    mapping flagged ``is_secret`` also has its ``value`` masked.

    Args:
        params: Arbitrary nested mappings/lists/scalars.

    Returns:
        A copy of params with sensitive values masked.
    """
    if isinstance(params, Mapping):
        secret_row = bool(params.get("is_secret"))
        cleaned: dict[str, Any] = {}
        for key, value in params.items():
            lowered = str(key).lower()
            if any(marker in lowered for marker in SENSITIVE_KEYS):
                cleaned[key] = MASK
            elif secret_row and lowered == "value":
                cleaned[key] = MASK
            else:
                cleaned[key] = sanitize_for_logging(value)
        return cleaned
    if isinstance(params, (list, tuple)):
        return [sanitize_for_logging(item) for item in params]
    return params
