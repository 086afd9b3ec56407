# src/log_manager/store/codec.py

"""
JSON document <-> AppData.

Layout of the document:

    {
      "tasks":     {"<id>": {...Task fields...}, ...},
      "schedules": {"<id>": {...Schedule fields...}, ...},
      "timers":    {"<id>": {...Timer fields...}, ...}
    }

Timestamps are ISO-8601 strings. `created_at` carries a UTC offset, the
other timestamps are naive wall-clock times.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from .errors import DocumentError
from .models import AppData, Schedule, Task, Timer

logger = logging.getLogger(__name__)

E = TypeVar("E", Task, Schedule, Timer)

# RFC 3339 writers may emit nanoseconds; datetime only keeps microseconds.
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


# ---- field helpers ----


def _fmt_ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(raw: Any, where: str) -> datetime:
    if not isinstance(raw, str):
        raise DocumentError(f"{where}: expected timestamp string, got {type(raw).__name__}")
    text = _LONG_FRACTION.sub(r"\1", raw.strip())
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise DocumentError(f"{where}: bad timestamp {raw!r}") from e


def _opt_ts(obj: dict[str, Any], key: str, where: str) -> datetime | None:
    raw = obj.get(key)
    if raw is None:
        return None
    return _parse_ts(raw, f"{where}.{key}")


def _req(obj: dict[str, Any], key: str, kind: type | tuple[type, ...], where: str) -> Any:
    if key not in obj:
        raise DocumentError(f"{where}: missing field {key!r}")
    val = obj[key]
    # bool is an int subclass; never accept it where a count is expected
    if isinstance(val, bool) and kind is int:
        raise DocumentError(f"{where}.{key}: expected int, got bool")
    if not isinstance(val, kind):
        raise DocumentError(f"{where}.{key}: unexpected type {type(val).__name__}")
    return val


def _seconds(obj: dict[str, Any], key: str, where: str) -> int:
    val = _req(obj, key, int, where)
    if val < 0:
        raise DocumentError(f"{where}.{key}: negative seconds")
    return val


# ---- entities ----


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "completed": task.completed,
        "created_at": _fmt_ts(task.created_at),
        "due_date": _fmt_ts(task.due_date),
    }


def task_from_dict(obj: dict[str, Any], where: str = "task") -> Task:
    return Task(
        id=_req(obj, "id", str, where),
        title=_req(obj, "title", str, where),
        description=_req(obj, "description", str, where),
        completed=_req(obj, "completed", bool, where),
        created_at=_parse_ts(_req(obj, "created_at", str, where), f"{where}.created_at"),
        due_date=_opt_ts(obj, "due_date", where),
    )


def schedule_to_dict(schedule: Schedule) -> dict[str, Any]:
    return {
        "id": schedule.id,
        "title": schedule.title,
        "description": schedule.description,
        "start_time": _fmt_ts(schedule.start_time),
        "end_time": _fmt_ts(schedule.end_time),
        "is_reminder": schedule.is_reminder,
    }


def schedule_from_dict(obj: dict[str, Any], where: str = "schedule") -> Schedule:
    return Schedule(
        id=_req(obj, "id", str, where),
        title=_req(obj, "title", str, where),
        description=_req(obj, "description", str, where),
        start_time=_parse_ts(_req(obj, "start_time", str, where), f"{where}.start_time"),
        end_time=_opt_ts(obj, "end_time", where),
        is_reminder=_req(obj, "is_reminder", bool, where),
    )


def timer_to_dict(timer: Timer) -> dict[str, Any]:
    return {
        "id": timer.id,
        "name": timer.name,
        "duration": timer.duration,
        "elapsed": timer.elapsed,
        "is_running": timer.is_running,
        "is_pomodoro": timer.is_pomodoro,
    }


def timer_from_dict(obj: dict[str, Any], where: str = "timer") -> Timer:
    return Timer(
        id=_req(obj, "id", str, where),
        name=_req(obj, "name", str, where),
        duration=_seconds(obj, "duration", where),
        elapsed=_seconds(obj, "elapsed", where),
        is_running=_req(obj, "is_running", bool, where),
        is_pomodoro=_req(obj, "is_pomodoro", bool, where),
    )


# ---- document ----


def _decode_mapping(
    doc: dict[str, Any],
    name: str,
    from_dict: Callable[[dict[str, Any], str], E],
) -> dict[str, E]:
    raw = doc.get(name)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DocumentError(f"{name}: expected an object keyed by id")

    out: dict[str, E] = {}
    for key, obj in raw.items():
        where = f"{name}[{key}]"
        if not isinstance(obj, dict):
            raise DocumentError(f"{where}: expected an object")
        entity = from_dict(obj, where)
        if entity.id in out:
            raise DocumentError(f"{where}: id {entity.id!r} used by more than one record")
        if entity.id != key:
            logger.warning("Re-keying %s: key %r != id %r", name, key, entity.id)
        out[entity.id] = entity
    return out


def data_to_dict(data: AppData) -> dict[str, Any]:
    return {
        "tasks": {k: task_to_dict(v) for k, v in data.tasks.items()},
        "schedules": {k: schedule_to_dict(v) for k, v in data.schedules.items()},
        "timers": {k: timer_to_dict(v) for k, v in data.timers.items()},
    }


def data_from_dict(doc: Any) -> AppData:
    if not isinstance(doc, dict):
        raise DocumentError("document root must be an object")
    return AppData(
        tasks=_decode_mapping(doc, "tasks", task_from_dict),
        schedules=_decode_mapping(doc, "schedules", schedule_from_dict),
        timers=_decode_mapping(doc, "timers", timer_from_dict),
    )


def encode_document(data: AppData) -> str:
    return json.dumps(data_to_dict(data), ensure_ascii=False, indent=2)


def decode_document(text: str) -> AppData:
    try:
        doc = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DocumentError(f"invalid JSON: {e}") from e
    return data_from_dict(doc)
