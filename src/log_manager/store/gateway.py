# src/log_manager/store/gateway.py

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from .codec import decode_document, encode_document
from .errors import PersistenceError
from .models import AppData

logger = logging.getLogger(__name__)

APP_DIR_NAME = "log-manager"
DATA_FILE_NAME = "app_data.json"


def user_config_dir() -> Path:
    """
    Per-user configuration area of the host OS.

    - Windows: %APPDATA%
    - macOS:   ~/Library/Application Support
    - other:   $XDG_CONFIG_HOME or ~/.config
    Falls back to the current directory when no home can be determined.
    """
    try:
        home = Path.home()
    except RuntimeError:
        return Path(".")

    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"

    if sys.platform == "darwin":
        return home / "Library" / "Application Support"

    xdg = os.getenv("XDG_CONFIG_HOME", "").strip()
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return home / ".config"


def default_data_file() -> Path:
    return user_config_dir() / APP_DIR_NAME / DATA_FILE_NAME


class JsonFileGateway:
    """
    Reads and writes the whole store as one JSON file.

    - missing file on load -> empty data (first run)
    - unreadable / corrupt file on load -> logged, empty data
    - save always rewrites the full document (temp file + os.replace)
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else default_data_file()
        self._dir_ready = False

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppData:
        path = self._path
        if not path.exists():
            logger.info("No data file at %s, starting empty.", path)
            return AppData()

        try:
            text = path.read_text("utf-8")
            data = decode_document(text)
        except (OSError, UnicodeDecodeError, PersistenceError):
            logger.exception("Failed to load data file %s; starting empty.", path)
            return AppData()

        logger.info(
            "Loaded %s: tasks=%d schedules=%d timers=%d",
            path,
            len(data.tasks),
            len(data.schedules),
            len(data.timers),
        )
        return data

    def _ensure_dir(self) -> None:
        if self._dir_ready:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._dir_ready = True

    def save(self, data: AppData) -> None:
        path = self._path
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            text = encode_document(data)
            self._ensure_dir()
            tmp.write_text(text, "utf-8")
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"failed to write {path}: {e}") from e

        logger.debug(
            "Saved %s: tasks=%d schedules=%d timers=%d",
            path,
            len(data.tasks),
            len(data.schedules),
            len(data.timers),
        )
