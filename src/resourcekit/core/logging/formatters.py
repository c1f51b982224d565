"""
Custom logging formatters.

  - JsonFormatter: one JSON object per line, for log collectors. Carries the
    observability fields (service, env, version, request_id) and every
    structured `extra` a call site attaches, e.g.

        logger.info("service.create.success", extra={"resource": "UserRole", "entity_id": "..."})
        -> {"message": "service.create.success", "resource": "UserRole", "entity_id": "...", ...}

  - ColorFormatter: compact ANSI-coloured lines for local consoles
    (LOG_FORMAT=text).

Formatters render whatever reaches them; sensitive extras are masked earlier by
`RedactFilter`.
"""
import json
import logging
from importlib import metadata
from typing import Any
from logging import LogRecord


def get_package_version(distribution: str = "resourcekit") -> str:
    """Installed version of the distribution, or "unknown" when running from a source tree."""
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return "unknown"


PACKAGE_VERSION = get_package_version()

# Attributes every LogRecord carries; anything else on the record came from `extra`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "request_id", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Structured JSON formatter.

    Construction (dictConfig passes these as kwargs):
      - env: environment name ("development" | "production" | ...)
      - service: logical service name (Settings.SERVICE_NAME)
      - datefmt: optional date format used by formatTime

    `format()` never raises: extras that are not JSON-serializable are
    stringified.
    """

    def __init__(self, *, env: str | None = None, service: str = "resourcekit", datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.env = env
        self.service = service

    def format(self, record: LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "request_id": getattr(record, "request_id", "-"),
            "service": self.service,
            "env": self.env,
            "version": PACKAGE_VERSION,
        }

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_record or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_record[key] = value
            except (TypeError, ValueError):
                log_record[key] = str(value)

        return json.dumps(log_record, ensure_ascii=False, default=str)


class ColorFormatter(logging.Formatter):
    """
    Development console formatter:

        2025-01-01 10:00:00,000 | INFO       | resourcekit.services.crud_service | 4f0c... | service.create.success

    Only the level name is coloured. Tracebacks are appended on the next lines.
    """

    COLOR_CODES = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;41m",
        "RESET": "\033[0m",
    }

    def format(self, record: LogRecord) -> str:
        color = self.COLOR_CODES.get(record.levelname, "")
        reset = self.COLOR_CODES["RESET"]

        line = (
            f"{self.formatTime(record, self.datefmt)} | {color}{record.levelname:<10}{reset} | "
            f"{record.name:<30} | "
            f"{getattr(record, 'request_id', '-'):<10} | "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        if record.stack_info:
            line += "\n" + self.formatStack(record.stack_info)
        return line
