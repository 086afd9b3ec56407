# src/log_manager/api.py

"""
Operations exposed to the UI layer.

Each function takes the AppState, delegates to the store (which locks and
saves) and returns JSON-ready payloads in the same shape as the data file.
StoreError propagates; its text is what the UI should show.
"""

from __future__ import annotations

import logging
from typing import Any

from .core.state import AppState
from .store.codec import schedule_to_dict, task_to_dict, timer_to_dict

logger = logging.getLogger(__name__)

Payload = dict[str, Any]


def get_app_state(state: AppState) -> Payload:
    snap = state.store.get_all()
    return {
        "tasks": {k: task_to_dict(v) for k, v in snap.tasks.items()},
        "schedules": {k: schedule_to_dict(v) for k, v in snap.schedules.items()},
        "timers": {k: timer_to_dict(v) for k, v in snap.timers.items()},
    }


# ---- tasks ----


def add_task(
    state: AppState, *, title: str, description: str, due_date: str | None = None
) -> Payload:
    task = state.store.add_task(title, description, due_date)
    logger.info("Task added id=%s", task.id)
    return task_to_dict(task)


def toggle_task(state: AppState, *, task_id: str) -> bool:
    return state.store.toggle_task(task_id)


def delete_task(state: AppState, *, task_id: str) -> None:
    state.store.delete_task(task_id)
    logger.info("Task deleted id=%s", task_id)


# ---- schedules ----


def add_schedule(
    state: AppState,
    *,
    title: str,
    description: str,
    start_time: str,
    end_time: str | None = None,
    is_reminder: bool = False,
) -> Payload:
    schedule = state.store.add_schedule(title, description, start_time, end_time, is_reminder)
    logger.info("Schedule added id=%s reminder=%s", schedule.id, schedule.is_reminder)
    return schedule_to_dict(schedule)


def delete_schedule(state: AppState, *, schedule_id: str) -> None:
    state.store.delete_schedule(schedule_id)
    logger.info("Schedule deleted id=%s", schedule_id)


# ---- timers ----


def create_timer(state: AppState, *, name: str, duration: int, is_pomodoro: bool = False) -> Payload:
    timer = state.store.create_timer(name, duration, is_pomodoro)
    logger.info("Timer created id=%s", timer.id)
    return timer_to_dict(timer)


def start_timer(state: AppState, *, timer_id: str) -> None:
    state.store.start_timer(timer_id)


def stop_timer(state: AppState, *, timer_id: str) -> None:
    state.store.stop_timer(timer_id)


def reset_timer(state: AppState, *, timer_id: str) -> Payload:
    return timer_to_dict(state.store.reset_timer(timer_id))


def advance_timer(state: AppState, *, timer_id: str, seconds: int) -> Payload:
    return timer_to_dict(state.store.advance_timer(timer_id, seconds))


def delete_timer(state: AppState, *, timer_id: str) -> None:
    state.store.delete_timer(timer_id)
    logger.info("Timer deleted id=%s", timer_id)
