"""
Structured logging setup for the animals store.

This module configures:
- StreamHandler to stderr
- Optional RotatingFileHandler <log_dir>/animals.log (1 MB max, 5 backups)
- Plain text or JSON log formatter (stdlib json)

Usage:
    from utils.structured_logging import setup_logging
    setup_logging(level="INFO", log_format="json", log_dir="logs")
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from pathlib import Path

_CONFIGURED_FLAG = "_animals_structured_logging_configured"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter with core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
        }
        # Optional demo step name passed via extra={"step": ...}
        step = getattr(record, "step", None)
        if step:
            payload["step"] = step
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def is_structured_logging_configured(logger: logging.Logger) -> bool:
    return getattr(logger, _CONFIGURED_FLAG, False)


def set_structured_logging_configured(logger: logging.Logger, value: bool = True) -> None:
    setattr(logger, _CONFIGURED_FLAG, value)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_dir: str | Path | None = None,
    force: bool = False,
) -> None:
    """Configure root logging with an optional rotating log file.

    Args:
        level: Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
        log_format: "text" for the classic line format, "json" for JsonFormatter.
        log_dir: Directory for animals.log; console only when None.
        force: Reconfigure even if a previous call already configured logging.
    """
    root = logging.getLogger()
    if is_structured_logging_configured(root) and not force:
        return

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    stream_handler = logging.StreamHandler(stream=sys.stderr)
    stream_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream_handler]

    if log_dir is not None:
        logs_path = Path(log_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(logs_path / "animals.log"),
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    lvl = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(lvl)
    root.handlers = handlers

    set_structured_logging_configured(root)
    logging.getLogger(__name__).debug("Structured logging configured")
