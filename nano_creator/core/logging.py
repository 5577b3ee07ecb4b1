"""
Logging setup for the studio

Two renderings of the same records:
- StructuredFormatter: one JSON object per line (log files, LOG_JSON=true)
- DevelopmentFormatter: coloured single lines for the terminal

Every record carries the studio session id and the generation operation in
flight (research, image_generation, ...) when they are set, so a retry storm
or a partially failed batch can be followed across modules.
"""

import json
import logging
import os
import sys
import time
from contextvars import ContextVar
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

REDACTED = "***REDACTED***"
SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization")

session_id_var: ContextVar[Optional[str]] = ContextVar("session_id", default=None)
operation_var: ContextVar[Optional[str]] = ContextVar("operation", default=None)

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("urllib3", "httpx", "httpcore", "asyncio", "google_genai")

# Attributes every LogRecord has; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "session_id", "operation"}


def _context_fields() -> Dict[str, str]:
    fields = {}
    session_id = session_id_var.get()
    if session_id:
        fields["session_id"] = session_id
    operation = operation_var.get()
    if operation:
        fields["operation"] = operation
    return fields


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def _sanitize_for_logging(key: str, value: Any) -> Any:
    """Redact values stored under credential-like keys, at any depth."""
    if isinstance(value, dict):
        return {
            k: REDACTED if _is_sensitive_key(str(k)) else _sanitize_for_logging(str(k), v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_sanitize_for_logging(key, item) for item in value)
    if isinstance(value, str) and _is_sensitive_key(key):
        return REDACTED
    return value


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    extras = dict(getattr(record, "extra_data", None) or {})
    for key, value in vars(record).items():
        if key in _RECORD_ATTRS or key == "extra_data" or key.startswith("_") or callable(value):
            continue
        extras.setdefault(key, value)
    return extras


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": _sanitize_for_logging("message", record.getMessage()),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(_context_fields())

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        extras = _record_extras(record)
        if extras:
            entry["extra"] = _sanitize_for_logging("extra", extras)

        return json.dumps(entry, ensure_ascii=False, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured one-line records for interactive runs"""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        tags = []
        context = _context_fields()
        if "session_id" in context:
            tags.append(f"session:{context['session_id'][:8]}")
        if "operation" in context:
            tags.append(f"op:{context['operation']}")
        tag_text = f" [{', '.join(tags)}]" if tags else ""

        line = f"{color}{clock} {record.levelname:<8}{self.RESET} {record.name:<30}{tag_text} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adds the correlation context and the adapter's fixed fields to ``extra``"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        extra = kwargs.setdefault("extra", {})
        extra.update(_context_fields())
        if self.extra:
            extra.update(self.extra)
        return msg, kwargs


def _console_handler(level: int, use_json: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=int(os.getenv("LOG_MAX_BYTES", str(20 * 1024 * 1024))),
        backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
) -> None:
    """
    Configure the root logger for a studio run

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Optional rotating log file; always written as JSON
        use_json: Render the console as JSON too
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.addHandler(_console_handler(numeric_level, use_json))
    if log_file:
        root.addHandler(_file_handler(Path(log_file), numeric_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Logger whose records carry ``extra`` plus the correlation context

    Example:
        logger = get_logger(__name__, component="retry_executor")
        logger.warning("Attempt failed", extra={"attempt": 2})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_session_id(session_id: str) -> None:
    session_id_var.set(session_id)


def set_operation(operation: Optional[str]) -> None:
    """Name the generation operation in flight; None clears it"""
    operation_var.set(operation)


def clear_context() -> None:
    session_id_var.set(None)
    operation_var.set(None)


class LogTimer:
    """Logs start, completion and failure of a block with its duration"""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self._started: Optional[float] = None

    def __enter__(self) -> "LogTimer":
        self._started = time.perf_counter()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        duration_ms = round((time.perf_counter() - self._started) * 1000, 2)
        if exc_type is None:
            self.logger.log(self.level, f"Completed: {self.operation}", extra={"duration_ms": duration_ms})
        else:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_ms": duration_ms, "error": str(exc_val)},
                exc_info=True,
            )
