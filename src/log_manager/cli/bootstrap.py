# src/log_manager/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root": it takes the settings once and
wires the JSON file gateway and the store into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..store.app_store import AppStore
from ..store.gateway import JsonFileGateway

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    gateway = JsonFileGateway(settings.data_file)
    store = AppStore.open(gateway)
    logger.debug("State created data_file=%s", gateway.path)
    return AppState(settings=settings, store=store)
