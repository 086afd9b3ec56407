# src/log_manager/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading the data file), then runs the
console front end in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..cli.console import run_console_loop
from ..config import get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    console_level = getattr(logging, settings.log_level, logging.INFO)
    setup_logging(
        log_dir=settings.log_dir if settings.log_to_file else None,
        console_level=console_level,
    )

    logger.info("Starting %s (data file %s)...", settings.app_name, settings.data_file)

    state = create_initial_state(settings=settings)
    try:
        run_console_loop(state)
    finally:
        # Every mutation is already on disk; nothing to flush here.
        logger.info("Bye.")


if __name__ == "__main__":
    main()
