"""JSON log files for the app plus crash capture for the GUI process."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Any

from .config import config_root


_LOGGER_NAME = "picoraster"

# Extra record attributes copied into the JSON payload when present.
_RECORD_FIELDS = ("event", "crash_id", "exit_code", "sketch")

_fault_file: IO[str] | None = None
_previous_excepthook = None


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for name in _RECORD_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    keep_files: int = 7,
    console: bool = True,
    directory: Path | None = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """Attach the rotating JSON file handler once; later calls are no-ops.

    The console handler only shows warnings so sketch errors are visible
    without repeating every frame-level info record.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    path = (directory or log_dir()) / "picoraster.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        stream_handler.setLevel(logging.WARNING)
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def install_crash_hooks(directory: Path | None = None) -> None:
    """Log uncaught exceptions (Qt slot failures land here) and dump native faults.

    Sketch failures never reach these hooks; the engine turns them into
    error messages. Call ``uninstall_crash_hooks`` on shutdown.
    """
    global _fault_file, _previous_excepthook
    logger = get_logger()

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        crash_id = str(uuid.uuid4())
        logger.critical(
            f"uncaught exception crash_id={crash_id}",
            exc_info=(exc_type, exc_value, exc_tb),
            extra={"event": "uncaught_exception", "crash_id": crash_id},
        )

    if _previous_excepthook is None:
        _previous_excepthook = sys.excepthook
    sys.excepthook = _log_uncaught

    if _fault_file is None:
        _fault_file = ((directory or log_dir()) / "fault.log").open("a", encoding="utf-8")
        faulthandler.enable(file=_fault_file, all_threads=True)
        logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})


def uninstall_crash_hooks() -> None:
    global _fault_file, _previous_excepthook
    if _previous_excepthook is not None:
        sys.excepthook = _previous_excepthook
        _previous_excepthook = None
    if _fault_file is not None:
        faulthandler.disable()
        _fault_file.close()
        _fault_file = None
