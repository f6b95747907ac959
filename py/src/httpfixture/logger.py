from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from httpfixture.sanitization import sanitize_field_value, sanitize_log_string


@runtime_checkable
class StructuredLogger(Protocol):
    def debug(self, message: str, *fields: dict[str, Any]) -> None: ...

    def info(self, message: str, *fields: dict[str, Any]) -> None: ...

    def warn(self, message: str, *fields: dict[str, Any]) -> None: ...

    def error(self, message: str, *fields: dict[str, Any]) -> None: ...

    def with_field(self, key: str, value: Any) -> StructuredLogger: ...

    def with_fields(self, fields: dict[str, Any]) -> StructuredLogger: ...


class NoOpLogger:
    def debug(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def info(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def warn(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def error(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def with_field(self, _key: str, _value: Any) -> StructuredLogger:
        return self

    def with_fields(self, _fields: dict[str, Any]) -> StructuredLogger:
        return self


class StdlibLogger:
    """Forwards structured events to a :mod:`logging` logger.

    Fields are sanitized and appended to the message as ``key=value`` pairs so
    header secrets and multi-line values never reach the log stream verbatim.
    """

    def __init__(self, logger: logging.Logger | None = None, fields: dict[str, Any] | None = None) -> None:
        self._logger = logger or logging.getLogger("httpfixture")
        self._fields = dict(fields or {})

    def debug(self, message: str, *fields: dict[str, Any]) -> None:
        self._emit(logging.DEBUG, message, fields)

    def info(self, message: str, *fields: dict[str, Any]) -> None:
        self._emit(logging.INFO, message, fields)

    def warn(self, message: str, *fields: dict[str, Any]) -> None:
        self._emit(logging.WARNING, message, fields)

    def error(self, message: str, *fields: dict[str, Any]) -> None:
        self._emit(logging.ERROR, message, fields)

    def with_field(self, key: str, value: Any) -> StructuredLogger:
        return self.with_fields({key: value})

    def with_fields(self, fields: dict[str, Any]) -> StructuredLogger:
        merged = dict(self._fields)
        merged.update(fields or {})
        return StdlibLogger(self._logger, merged)

    def _emit(self, level: int, message: str, extra: tuple[dict[str, Any], ...]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        merged = dict(self._fields)
        for f in extra:
            merged.update(f or {})
        parts = [sanitize_log_string(message)]
        for key in sorted(merged):
            parts.append(f"{key}={sanitize_field_value(key, merged[key])}")
        self._logger.log(level, " ".join(parts))


_global_logger: StructuredLogger = NoOpLogger()


def get_logger() -> StructuredLogger:
    return _global_logger


def set_logger(logger: StructuredLogger | None) -> None:
    global _global_logger
    _global_logger = logger if logger is not None else NoOpLogger()


__all__ = [
    "NoOpLogger",
    "StdlibLogger",
    "StructuredLogger",
    "get_logger",
    "set_logger",
]
