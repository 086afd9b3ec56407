# src/log_manager/store/app_store.py

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ..core.ports import DocumentGateway
from .errors import MalformedError, NotFoundError, PersistenceError
from .guard import Guarded, LockLike
from .models import AppData, Schedule, Task, Timer, new_id
from .timefmt import now_local, parse_optional, parse_required

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Copies of every record at one point in time."""

    tasks: dict[str, Task]
    schedules: dict[str, Schedule]
    timers: dict[str, Timer]


def _copy(entity):
    # All record fields are immutable values, so a shallow copy is a full copy.
    return dataclasses.replace(entity)


class AppStore:
    """
    In-memory store of tasks, schedules and timers.

    Concurrency:
    - all state lives in one Guarded cell; every operation holds it for its
      whole duration, including the save
    - operations never hand out references to stored records, only copies

    Persistence:
    - each successful mutation rewrites the whole document before returning
    - a failed save is logged and otherwise ignored; memory stays authoritative
    """

    def __init__(self, cell: Guarded[AppData], gateway: DocumentGateway) -> None:
        self._cell = cell
        self._gateway = gateway

    @classmethod
    def open(cls, gateway: DocumentGateway, *, lock: LockLike | None = None) -> AppStore:
        data = gateway.load()
        store = cls(Guarded(data, lock), gateway)
        logger.info(
            "AppStore ready tasks=%d schedules=%d timers=%d",
            len(data.tasks),
            len(data.schedules),
            len(data.timers),
        )
        return store

    # ---- low-level helpers ----

    @contextmanager
    def _mutate(self) -> Iterator[AppData]:
        """Exclusive access followed by a save, all under the guard."""
        with self._cell.hold() as data:
            yield data
            self._persist(data)

    def _persist(self, data: AppData) -> None:
        try:
            self._gateway.save(data)
        except PersistenceError:
            logger.exception("Failed to save app data; keeping in-memory state.")

    # ---- reads ----

    def get_all(self) -> Snapshot:
        with self._cell.hold() as data:
            return Snapshot(
                tasks={k: _copy(v) for k, v in data.tasks.items()},
                schedules={k: _copy(v) for k, v in data.schedules.items()},
                timers={k: _copy(v) for k, v in data.timers.items()},
            )

    def get_task(self, task_id: str) -> Task:
        with self._cell.hold() as data:
            task = data.tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)
            return _copy(task)

    def get_schedule(self, schedule_id: str) -> Schedule:
        with self._cell.hold() as data:
            schedule = data.schedules.get(schedule_id)
            if schedule is None:
                raise NotFoundError("Schedule", schedule_id)
            return _copy(schedule)

    def get_timer(self, timer_id: str) -> Timer:
        with self._cell.hold() as data:
            timer = data.timers.get(timer_id)
            if timer is None:
                raise NotFoundError("Timer", timer_id)
            return _copy(timer)

    # ---- tasks ----

    def add_task(self, title: str, description: str, due_date: str | None = None) -> Task:
        task = Task(
            id=new_id(),
            title=title,
            description=description,
            created_at=now_local(),
            due_date=parse_optional(due_date),
        )
        with self._mutate() as data:
            data.tasks[task.id] = task
            logger.debug("Task added id=%s due_date=%s", task.id, task.due_date)
            return _copy(task)

    def toggle_task(self, task_id: str) -> bool:
        with self._mutate() as data:
            task = data.tasks.get(task_id)
            if task is None:
                raise NotFoundError("Task", task_id)
            task.completed = not task.completed
            logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)
            return task.completed

    def delete_task(self, task_id: str) -> None:
        with self._mutate() as data:
            if data.tasks.pop(task_id, None) is None:
                raise NotFoundError("Task", task_id)
            logger.debug("Task deleted id=%s", task_id)

    # ---- schedules ----

    def add_schedule(
        self,
        title: str,
        description: str,
        start_time: str,
        end_time: str | None = None,
        is_reminder: bool = False,
    ) -> Schedule:
        # Required start is strict, optional end is lenient.
        schedule = Schedule(
            id=new_id(),
            title=title,
            description=description,
            start_time=parse_required(start_time, "start_time"),
            end_time=parse_optional(end_time),
            is_reminder=is_reminder,
        )
        with self._mutate() as data:
            data.schedules[schedule.id] = schedule
            logger.debug(
                "Schedule added id=%s start=%s reminder=%s",
                schedule.id,
                schedule.start_time,
                is_reminder,
            )
            return _copy(schedule)

    def delete_schedule(self, schedule_id: str) -> None:
        with self._mutate() as data:
            if data.schedules.pop(schedule_id, None) is None:
                raise NotFoundError("Schedule", schedule_id)
            logger.debug("Schedule deleted id=%s", schedule_id)

    # ---- timers ----

    def create_timer(self, name: str, duration: int, is_pomodoro: bool = False) -> Timer:
        if duration < 0:
            raise MalformedError("duration", duration, "must not be negative")
        timer = Timer(id=new_id(), name=name, duration=int(duration), is_pomodoro=is_pomodoro)
        with self._mutate() as data:
            data.timers[timer.id] = timer
            logger.debug("Timer created id=%s duration=%s pomodoro=%s", timer.id, duration, is_pomodoro)
            return _copy(timer)

    def _set_running(self, timer_id: str, running: bool) -> None:
        with self._mutate() as data:
            timer = data.timers.get(timer_id)
            if timer is None:
                raise NotFoundError("Timer", timer_id)
            timer.is_running = running
            logger.debug("Timer id=%s running=%s", timer_id, running)

    def start_timer(self, timer_id: str) -> None:
        self._set_running(timer_id, True)

    def stop_timer(self, timer_id: str) -> None:
        self._set_running(timer_id, False)

    def reset_timer(self, timer_id: str) -> Timer:
        with self._mutate() as data:
            timer = data.timers.get(timer_id)
            if timer is None:
                raise NotFoundError("Timer", timer_id)
            timer.elapsed = 0
            timer.is_running = False
            return _copy(timer)

    def advance_timer(self, timer_id: str, seconds: int) -> Timer:
        """
        Add progress to a timer; called by whatever drives the clock (UI tick).

        `elapsed` never exceeds `duration`; reaching it stops the timer.
        """
        if seconds < 0:
            raise MalformedError("seconds", seconds, "must not be negative")
        with self._mutate() as data:
            timer = data.timers.get(timer_id)
            if timer is None:
                raise NotFoundError("Timer", timer_id)
            timer.elapsed = min(timer.duration, timer.elapsed + int(seconds))
            if timer.elapsed >= timer.duration:
                timer.is_running = False
            return _copy(timer)

    def delete_timer(self, timer_id: str) -> None:
        with self._mutate() as data:
            if data.timers.pop(timer_id, None) is None:
                raise NotFoundError("Timer", timer_id)
            logger.debug("Timer deleted id=%s", timer_id)
