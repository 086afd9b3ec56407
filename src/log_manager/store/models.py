# src/log_manager/store/models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


def new_id() -> str:
    """Random 128-bit identifier rendered as a canonical UUID string."""
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    created_at: datetime  # aware, local zone
    completed: bool = False
    due_date: datetime | None = None  # naive


@dataclass(slots=True)
class Schedule:
    id: str
    title: str
    description: str
    start_time: datetime  # naive
    end_time: datetime | None = None
    is_reminder: bool = False


@dataclass(slots=True)
class Timer:
    id: str
    name: str
    duration: int  # seconds
    elapsed: int = 0  # seconds
    is_running: bool = False
    is_pomodoro: bool = False


@dataclass(slots=True)
class AppData:
    """
    Everything the app persists: three id -> record mappings.

    Keys always equal the record's own `id`.
    """

    tasks: dict[str, Task] = field(default_factory=dict)
    schedules: dict[str, Schedule] = field(default_factory=dict)
    timers: dict[str, Timer] = field(default_factory=dict)
