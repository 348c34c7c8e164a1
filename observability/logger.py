"""Session event logging: one readable console line per event, JSON lines on disk."""
from __future__ import annotations

import json
import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Any, Dict

from config.settings import settings

_HUMAN_FORMAT = "[%(asctime)s] %(levelname)s %(name)s :: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Keys shown on the console line, in order; everything else only goes to the JSON file.
_HUMAN_KEYS = ("action", "status", "question_index", "difficulty", "score", "field", "op", "ms", "outcome")

_logger = logging.getLogger("interview.events")
_logger.propagate = False


class _JsonOnly(logging.Filter):
    def __init__(self, wanted: bool) -> None:
        super().__init__()
        self._wanted = wanted

    def filter(self, record: logging.LogRecord) -> bool:
        return getattr(record, "is_json", False) is self._wanted


def _ensure_handlers() -> None:
    if _logger.handlers:
        return
    _logger.setLevel(settings.LOG_LEVEL.upper())

    console = logging.StreamHandler(stream=sys.stdout)
    console.setFormatter(logging.Formatter(_HUMAN_FORMAT, datefmt=_DATE_FORMAT))
    console.addFilter(_JsonOnly(False))
    _logger.addHandler(console)

    if not settings.EVENT_LOG_FILE:
        return
    path = Path(settings.EVENT_LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    events = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=settings.EVENT_LOG_MAX_BYTES,
        backupCount=settings.EVENT_LOG_BACKUPS,
        encoding="utf-8",
    )
    events.setFormatter(logging.Formatter("%(message)s"))
    events.addFilter(_JsonOnly(True))
    _logger.addHandler(events)


def _format_human(event: Dict[str, Any]) -> str:
    parts = [f"session={event['session_id']}", f"kind={event['kind']}"]
    parts.extend(f"{key}={event[key]}" for key in _HUMAN_KEYS if key in event)
    return " ".join(parts)


def _emit(message: str, *, is_json: bool) -> None:
    record = _logger.makeRecord(_logger.name, logging.INFO, "", 0, message, (), None)
    record.is_json = is_json  # type: ignore[attr-defined]
    _logger.handle(record)


def log_event(kind: str, session_id: str, **fields: Any) -> None:
    """Record one interview event such as a transition, an AI call or an archive."""

    _ensure_handlers()
    event: Dict[str, Any] = {"ts": round(time.time(), 3), "kind": kind, "session_id": session_id, **fields}
    _emit(_format_human(event), is_json=False)
    if settings.EVENT_LOG_FILE:
        _emit(json.dumps(event, ensure_ascii=False, default=str), is_json=True)


__all__ = ["log_event"]
