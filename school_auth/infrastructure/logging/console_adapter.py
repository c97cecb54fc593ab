"""structlog-backed LoggerProtocol for the auth workflow.

Development gets the colored console renderer; testing, ci and production
get one JSON object per line. Any context key that looks like a secret
(password, token, credential hash) is masked before rendering, so a careless
call site cannot leak one into the log stream.

ConsoleAdapter satisfies LoggerProtocol structurally; it does not inherit.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "***"
SECRET_KEY_FRAGMENTS = ("password", "token", "secret", "credential_hash")


def redact_secrets(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    for key in event_dict:
        if key == "event":
            continue
        lowered = key.lower()
        # token_length and similar metadata stay visible
        if lowered.endswith(("_length", "_count")):
            continue
        if any(fragment in lowered for fragment in SECRET_KEY_FRAGMENTS):
            event_dict[key] = REDACTED
    return event_dict


class ConsoleAdapter:
    """Structured stdout logger.

    Args:
        use_json: JSON lines when True, console renderer otherwise.
        level: Minimum level name; unknown names fall back to INFO.
    """

    def __init__(self, *, use_json: bool = False, level: str = "INFO") -> None:
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer()
            if use_json
            else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        )
        min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                redact_secrets,
                renderer,
            ],
            wrapper_class=structlog.make_filtering_bound_logger(min_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
            cache_logger_on_first_use=True,
        )
        self._logger = structlog.get_logger("school_auth")

    @classmethod
    def _wrapping(cls, bound_logger: Any) -> ConsoleAdapter:
        adapter = cls.__new__(cls)
        adapter._logger = bound_logger
        return adapter

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log at error level; ``error`` is flattened to error_type/error_message."""
        self._logger.error(message, **_with_error(context, error))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        self._logger.critical(message, **_with_error(context, error))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Adapter that adds ``context`` to every later entry (e.g. request_id)."""
        return self._wrapping(self._logger.bind(**context))

    with_context = bind


def _with_error(context: dict[str, Any], error: Exception | None) -> dict[str, Any]:
    if error is None:
        return context
    return {
        **context,
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
