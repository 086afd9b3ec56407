# src/log_manager/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any, cast

from .. import api
from ..core.state import AppState
from ..store.errors import StoreError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console (/help, /task, /timer, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like '/command args "quoted arg"'.
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        logger.debug("Command /%s args=%s", name, args)

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except StoreError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting helpers ----


def _short(entity_id: str) -> str:
    return entity_id[:8]


def _fmt_when(raw: str | None) -> str:
    if not raw:
        return "-"
    return datetime.fromisoformat(raw).strftime("%Y-%m-%d %H:%M")


def _fmt_seconds(total: int) -> str:
    m, s = divmod(int(total), 60)
    return f"{m:02d}:{s:02d}"


class AmbiguousIdError(StoreError):
    def __init__(self, prefix: str) -> None:
        super().__init__(f"Id prefix {prefix!r} matches more than one record")


def _resolve_id(ids: Iterable[str], given: str) -> str:
    """
    Accept a full id or a unique prefix of one.

    Unknown input is returned unchanged so the store reports it as not found.
    """
    ids = list(ids)
    if given in ids:
        return given
    matches = [i for i in ids if i.startswith(given)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise AmbiguousIdError(given)
    return given


def _parse_duration(raw: str) -> int:
    """'90' -> 90 seconds, '25m' -> 1500, '1h' -> 3600."""
    text = raw.strip().lower()
    mult = 1
    if text.endswith("h"):
        mult, text = 3600, text[:-1]
    elif text.endswith("m"):
        mult, text = 60, text[:-1]
    elif text.endswith("s"):
        text = text[:-1]
    return int(text) * mult


def _render_task(t: dict[str, Any]) -> str:
    mark = "x" if t["completed"] else " "
    due = f" (due {_fmt_when(t['due_date'])})" if t["due_date"] else ""
    return f"[{mark}] {_short(t['id'])} {t['title']}{due}"


def _render_schedule(s: dict[str, Any]) -> str:
    kind = "reminder" if s["is_reminder"] else "event"
    span = _fmt_when(s["start_time"])
    if s["end_time"]:
        span += f" - {_fmt_when(s['end_time'])}"
    return f"{_short(s['id'])} {span} [{kind}] {s['title']}"


def _render_timer(t: dict[str, Any]) -> str:
    status = "running" if t["is_running"] else "stopped"
    kind = " pomodoro" if t["is_pomodoro"] else ""
    return (
        f"{_short(t['id'])} {t['name']} "
        f"{_fmt_seconds(t['elapsed'])}/{_fmt_seconds(t['duration'])} [{status}{kind}]"
    )


# ---- commands ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_state(state: AppState, args: list[str]) -> str:
    data = api.get_app_state(state)
    done = sum(1 for t in data["tasks"].values() if t["completed"])
    running = sum(1 for t in data["timers"].values() if t["is_running"])
    return (
        "State:\n"
        f"  Tasks: {len(data['tasks'])} ({done} done)\n"
        f"  Schedules: {len(data['schedules'])}\n"
        f"  Timers: {len(data['timers'])} ({running} running)\n"
        f"  Data file: {getattr(state.settings, 'data_file', '?')}"
    )


def cmd_tasks(state: AppState, args: list[str]) -> str:
    tasks = sorted(api.get_app_state(state)["tasks"].values(), key=lambda t: t["created_at"])
    if not tasks:
        return "No tasks."
    return "\n".join(_render_task(t) for t in tasks)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task add <title> [description] [due]
    /task done <id>
    /task rm <id>
    """
    usage = "Usage: /task add <title> [description] [YYYY-MM-DD HH:MM:SS] | /task done <id> | /task rm <id>"
    if not args:
        return usage

    sub = args[0].lower()

    if sub == "add" and len(args) >= 2:
        description = args[2] if len(args) >= 3 else ""
        due = args[3] if len(args) >= 4 else None
        task = api.add_task(state, title=args[1], description=description, due_date=due)
        return f"Added task {_short(task['id'])}: {task['title']}"

    if sub in ("done", "toggle") and len(args) == 2:
        ids = api.get_app_state(state)["tasks"].keys()
        completed = api.toggle_task(state, task_id=_resolve_id(ids, args[1]))
        return "Task marked done." if completed else "Task reopened."

    if sub in ("rm", "del", "delete") and len(args) == 2:
        ids = api.get_app_state(state)["tasks"].keys()
        api.delete_task(state, task_id=_resolve_id(ids, args[1]))
        return "Task deleted."

    return usage


def cmd_schedules(state: AppState, args: list[str]) -> str:
    items = sorted(
        api.get_app_state(state)["schedules"].values(), key=lambda s: s["start_time"]
    )
    if not items:
        return "No schedules."
    return "\n".join(_render_schedule(s) for s in items)


def cmd_schedule(state: AppState, args: list[str]) -> str:
    """
    /schedule add <title> <start> [end] [description]
    /schedule rm <id>
    """
    usage = "Usage: /schedule add <title> <start> [end] [description] | /schedule rm <id>"
    if not args:
        return usage

    sub = args[0].lower()

    if sub == "add" and len(args) >= 3:
        end = args[3] if len(args) >= 4 and args[3] else None
        description = args[4] if len(args) >= 5 else ""
        s = api.add_schedule(
            state, title=args[1], description=description, start_time=args[2], end_time=end
        )
        return f"Added schedule {_short(s['id'])}: {s['title']} at {_fmt_when(s['start_time'])}"

    if sub in ("rm", "del", "delete") and len(args) == 2:
        ids = api.get_app_state(state)["schedules"].keys()
        api.delete_schedule(state, schedule_id=_resolve_id(ids, args[1]))
        return "Schedule deleted."

    return usage


def cmd_remind(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /remind <title> <YYYY-MM-DD HH:MM:SS>"
    s = api.add_schedule(
        state, title=args[0], description="", start_time=args[1], is_reminder=True
    )
    return f"Reminder {_short(s['id'])} set for {_fmt_when(s['start_time'])}"


def cmd_timers(state: AppState, args: list[str]) -> str:
    timers = list(api.get_app_state(state)["timers"].values())
    if not timers:
        return "No timers."
    return "\n".join(_render_timer(t) for t in timers)


def cmd_timer(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /timer add <name> <duration> [pomodoro]
    /timer start|stop|reset|rm <id>
    /timer tick <id> <seconds>
    """
    usage = (
        "Usage: /timer add <name> <duration e.g. 90, 25m, 1h> [pomodoro] | "
        "/timer start|stop|reset|rm <id> | /timer tick <id> <seconds>"
    )
    if not args:
        return usage

    sub = args[0].lower()

    if sub == "add" and len(args) >= 3:
        try:
            duration = _parse_duration(args[2])
        except ValueError:
            return f"Bad duration: {args[2]!r}"
        pomodoro = len(args) >= 4 and args[3].lower() in ("pomodoro", "p", "yes", "1")
        t = api.create_timer(state, name=args[1], duration=duration, is_pomodoro=pomodoro)
        return f"Timer {_short(t['id'])} created: {t['name']} ({_fmt_seconds(t['duration'])})"

    if len(args) < 2:
        return usage

    timer_id = _resolve_id(api.get_app_state(state)["timers"].keys(), args[1])

    if sub == "start":
        api.start_timer(state, timer_id=timer_id)
        return "Timer started."
    if sub in ("stop", "pause"):
        api.stop_timer(state, timer_id=timer_id)
        return "Timer stopped."
    if sub == "reset":
        api.reset_timer(state, timer_id=timer_id)
        return "Timer reset."
    if sub in ("rm", "del", "delete"):
        api.delete_timer(state, timer_id=timer_id)
        return "Timer deleted."
    if sub == "tick" and len(args) == 3:
        try:
            seconds = _parse_duration(args[2])
        except ValueError:
            return f"Bad seconds value: {args[2]!r}"
        t = api.advance_timer(state, timer_id=timer_id, seconds=seconds)
        if not t["is_running"] and t["elapsed"] >= t["duration"] and emit is not None:
            emit(f"Timer {t['name']} finished.")
        return _render_timer(t)

    return usage


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("state", cmd_state, help_text="Show record counts and the data file path.")
registry.register("tasks", cmd_tasks, help_text="List tasks.")
registry.register("task", cmd_task, help_text="Tasks: /task add | done | rm.")
registry.register("schedules", cmd_schedules, help_text="List schedules and reminders.")
registry.register("schedule", cmd_schedule, help_text="Schedules: /schedule add | rm.")
registry.register("remind", cmd_remind, help_text="Add a reminder: /remind <title> <time>.")
registry.register("timers", cmd_timers, help_text="List timers.")
registry.register(
    "timer", cmd_timer, help_text="Timers: /timer add | start | stop | reset | tick | rm."
)
