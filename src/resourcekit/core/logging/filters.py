"""
Logging filters.

- `RequestIdFilter`: guarantees every LogRecord has a `request_id` attribute,
  read from a contextvar set per HTTP request by `RequestIDMiddleware`.
  Records logged outside a request get the sentinel "-".
- `RedactFilter`: masks sensitive values passed through `extra={...}`,
  including values nested inside dict extras (e.g. `extra={"criteria": {...}}`).

contextvars (not threading.local) keep the request id isolated per asyncio
task and preserved across `await`.

dictConfig wiring (see builder.py):
    "filters": {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }
"""

import logging
from logging import LogRecord
import contextvars
from typing import Any, Iterable

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

REDACTED = "***REDACTED***"


def set_request_id(request_id: str | None) -> contextvars.Token:
    """
    Set the request id in the current context.

    Returns:
        token: pass it to reset_request_id(token) to restore the previous value
    """
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """
    Set `record.request_id` to, in order of preference:
      - the value passed explicitly via `extra={"request_id": ...}`
      - the contextvar value (set by the middleware)
      - "-"
    Never drops a record.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = (
            getattr(record, "request_id", None) or get_request_id() or "-"
        )
        return True


class RedactFilter(logging.Filter):
    """
    Replace the value of any record attribute (or nested dict key) whose name is sensitive.

    Matching is case-insensitive on the whole key.
    """

    DEFAULT_SENSITIVE = frozenset({
        "password", "secret", "token", "access_token", "refresh_token",
        "authorization", "api_key", "ssn",
    })

    def __init__(self, name: str = "", sensitive: Iterable[str] | None = None):
        super().__init__(name)
        self.sensitive = frozenset(k.lower() for k in sensitive) if sensitive else self.DEFAULT_SENSITIVE

    def filter(self, record: LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            if key.lower() in self.sensitive:
                record.__dict__[key] = REDACTED
            elif isinstance(value, dict):
                record.__dict__[key] = self._redact_mapping(value)
        return True

    def _redact_mapping(self, value: dict) -> dict[str, Any]:
        # Copy: the dict belongs to the caller and may be reused after logging.
        redacted = {}
        for k, v in value.items():
            if isinstance(k, str) and k.lower() in self.sensitive:
                redacted[k] = REDACTED
            elif isinstance(v, dict):
                redacted[k] = self._redact_mapping(v)
            else:
                redacted[k] = v
        return redacted
