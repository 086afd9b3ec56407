# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from log_manager.core.state import AppState
from log_manager.store.app_store import AppStore
from log_manager.store.gateway import JsonFileGateway


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    A SimpleNamespace rather than the real config keeps tests away from
    the user's actual config directory.
    """
    data_dir = tmp_path / "log-manager"
    return SimpleNamespace(
        app_name="log-manager-test",
        log_level="DEBUG",
        log_to_file=False,
        data_dir=data_dir,
        data_file=data_dir / "app_data.json",
        log_dir=data_dir,
    )


@pytest.fixture()
def gateway(settings: SimpleNamespace) -> JsonFileGateway:
    return JsonFileGateway(settings.data_file)


@pytest.fixture()
def store(gateway: JsonFileGateway) -> AppStore:
    return AppStore.open(gateway)


@pytest.fixture()
def state(settings: SimpleNamespace, store: AppStore) -> AppState:
    return AppState(settings=settings, store=store)
