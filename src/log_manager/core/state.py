# src/log_manager/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..store.app_store import AppStore


@dataclass
class AppState:
    # Settings are kept on the state so other modules do not re-read config.
    settings: object
    store: AppStore
