"""Injected logging for the analyzer lifecycle.

The driver never reaches for a module-level logger; it receives something that
satisfies ``Logger``. ``StdLogger`` forwards to the stdlib ``logging`` tree,
``NullLogger`` drops everything (handy in tests and batch runs).
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Protocol

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class Logger(Protocol):
    def debug(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...


class NullLogger:
    def debug(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass


class StdLogger:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("astgate")

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def success(self, message: str) -> None:
        self._logger.log(SUCCESS, message)


def pad(value: str, width: int = 16) -> str:
    return value.ljust(width)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure the root logger for CLI use, replacing a handler from an earlier call."""
    for existing in list(logging.root.handlers):
        if getattr(existing, "astgate_handler", False):
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.astgate_handler = True
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.root.addHandler(handler)
    resolved = logging.getLevelName(level.upper())
    logging.root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
