# src/log_manager/cli/console.py

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..core.state import AppState
from .commands import CommandRegistry
from .commands import registry as command_registry

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def run_console_loop(
    state: AppState,
    *,
    registry: CommandRegistry | None = None,
    read_line: InputFn = input,
) -> None:
    """
    Line-oriented front end over the store operations.

    Runs until /exit, /quit, EOF or Ctrl+C.
    """
    registry = registry or command_registry
    app_name = str(getattr(state.settings, "app_name", "log-manager"))

    logger.info("Console started.")
    _print_ts(f"[{app_name}] Use /help for commands, /exit to quit.")

    while True:
        try:
            line = read_line(f"{app_name}> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = registry.handle(state, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Not a command. Use /help to list available commands."
        _print_ts(reply)

    logger.info("Console finished.")
