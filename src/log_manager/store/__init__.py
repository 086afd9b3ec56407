# src/log_manager/store/__init__.py

from .app_store import AppStore, Snapshot
from .errors import (
    DocumentError,
    GuardPoisonedError,
    MalformedError,
    NotFoundError,
    PersistenceError,
    StoreError,
)
from .gateway import JsonFileGateway, default_data_file
from .guard import Guarded
from .models import AppData, Schedule, Task, Timer

__all__ = [
    "AppData",
    "AppStore",
    "DocumentError",
    "Guarded",
    "GuardPoisonedError",
    "JsonFileGateway",
    "MalformedError",
    "NotFoundError",
    "PersistenceError",
    "Schedule",
    "Snapshot",
    "StoreError",
    "Task",
    "Timer",
    "default_data_file",
]
