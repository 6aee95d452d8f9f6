"""structlog setup for the export worker.

Every line a job writes carries the job's identifiers (bound by the
processor through contextvars) and, inside the job's span, the trace and
span ids, so log lines and traces can be joined.
"""

import logging
import re
import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

from export_worker.observability.tracing import current_trace_ids

REDACTED = "[REDACTED]"

# Values under these keys are never printed
REDACTED_KEYS: frozenset[str] = frozenset({
    "access_token",
    "api_key",
    "apikey",
    "authorization",
    "credentials",
    "dsn",
    "email",
    "password",
    "private_key",
    "refresh_token",
    "secret",
    "token",
})

# Patterns scrubbed from any string value: e-mail addresses, and the
# user:password@ part of connection URLs found in driver error messages
VALUE_SCRUBBERS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[EMAIL]"),
    (re.compile(r"(?<=://)[^/@\s]+@"), "[CREDENTIALS]@"),
)


def scrub(value: Any) -> Any:
    """Return value with sensitive keys and patterns masked, recursing into containers."""
    if isinstance(value, str):
        for pattern, replacement in VALUE_SCRUBBERS:
            value = pattern.sub(replacement, value)
        return value
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in REDACTED_KEYS else scrub(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [scrub(item) for item in value]
    return value


def redact_sensitive_values(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor applying scrub() to the whole event."""
    return cast(EventDict, scrub(dict(event_dict)))


def add_trace_ids(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor adding trace_id/span_id of the active span, if any."""
    for key, value in current_trace_ids().items():
        event_dict.setdefault(key, value)
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
    include_trace_ids: bool = True,
) -> None:
    """Configure structlog for the worker process.

    Args:
        level: Minimum level name; unknown names fall back to INFO
        format: "json" for production, "console" for development
        redact_pii: Mask credentials and e-mail addresses
        include_trace_ids: Add trace_id/span_id inside spans
    """
    processors: list[Any] = [structlog.contextvars.merge_contextvars]
    if include_trace_ids:
        processors.append(add_trace_ids)
    processors += [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if redact_pii:
        processors.append(redact_sensitive_values)
    processors.append(
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a logger for the given module name."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
