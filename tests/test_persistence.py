# tests/test_persistence.py

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from log_manager.store import gateway as gateway_mod
from log_manager.store.codec import decode_document, encode_document
from log_manager.store.errors import DocumentError, PersistenceError
from log_manager.store.gateway import JsonFileGateway, default_data_file
from log_manager.store.models import AppData, Schedule, Task, Timer


def _populated() -> AppData:
    tz = timezone(timedelta(hours=8))
    task = Task(
        id="t-1",
        title="Buy milk",
        description="2 litres, не забыть",
        created_at=datetime(2024, 1, 10, 8, 15, 30, 123456, tzinfo=tz),
        completed=True,
        due_date=datetime(2024, 1, 11, 18, 0, 0),
    )
    plain = Task(id="t-2", title="x", description="", created_at=datetime(2024, 1, 1, tzinfo=tz))
    schedule = Schedule(
        id="s-1",
        title="standup",
        description="",
        start_time=datetime(2024, 1, 15, 9, 0, 0),
        end_time=datetime(2024, 1, 15, 9, 15, 0),
        is_reminder=False,
    )
    reminder = Schedule(
        id="s-2", title="dentist", description="", start_time=datetime(2024, 2, 1, 14, 0), is_reminder=True
    )
    timer = Timer(id="m-1", name="focus", duration=1500, elapsed=300, is_running=True, is_pomodoro=True)
    return AppData(
        tasks={task.id: task, plain.id: plain},
        schedules={schedule.id: schedule, reminder.id: reminder},
        timers={timer.id: timer},
    )


# ---- codec ----


def test_round_trip_preserves_everything() -> None:
    data = _populated()
    assert decode_document(encode_document(data)) == data


def test_document_uses_plain_field_names() -> None:
    doc = json.loads(encode_document(_populated()))

    assert set(doc) == {"tasks", "schedules", "timers"}
    assert set(doc["tasks"]["t-1"]) == {
        "id", "title", "description", "completed", "created_at", "due_date"
    }
    assert doc["tasks"]["t-1"]["created_at"] == "2024-01-10T08:15:30.123456+08:00"
    assert doc["tasks"]["t-2"]["due_date"] is None
    assert doc["schedules"]["s-1"]["start_time"] == "2024-01-15T09:00:00"
    assert doc["timers"]["m-1"] == {
        "id": "m-1",
        "name": "focus",
        "duration": 1500,
        "elapsed": 300,
        "is_running": True,
        "is_pomodoro": True,
    }


def test_decode_accepts_rfc3339_with_nanoseconds() -> None:
    text = json.dumps(
        {
            "tasks": {
                "a": {
                    "id": "a",
                    "title": "t",
                    "description": "",
                    "completed": False,
                    "created_at": "2024-01-10T08:15:30.123456789+08:00",
                    "due_date": "2024-01-11T18:00:00",
                }
            },
            "schedules": {},
            "timers": {},
        }
    )
    task = decode_document(text).tasks["a"]
    assert task.created_at.microsecond == 123456
    assert task.created_at.utcoffset() == timedelta(hours=8)


def test_decode_missing_mappings_are_empty() -> None:
    assert decode_document("{}") == AppData()


def test_decode_rekeys_mismatched_ids(caplog: pytest.LogCaptureFixture) -> None:
    text = json.dumps(
        {"timers": {"wrong": {"id": "right", "name": "n", "duration": 1, "elapsed": 0,
                              "is_running": False, "is_pomodoro": False}}}
    )
    with caplog.at_level(logging.WARNING):
        data = decode_document(text)
    assert list(data.timers) == ["right"]
    assert "Re-keying" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[]",
        '{"tasks": []}',
        '{"timers": {"a": {"id": "a", "name": "n", "duration": true, "elapsed": 0,'
        ' "is_running": false, "is_pomodoro": false}}}',
        '{"schedules": {"a": {"id": "a", "title": "t", "description": "",'
        ' "is_reminder": false}}}',
    ],
)
def test_decode_rejects_invalid_documents(text: str) -> None:
    with pytest.raises(DocumentError):
        decode_document(text)


def test_decode_rejects_two_records_claiming_one_id() -> None:
    timer = {"name": "n", "duration": 1, "elapsed": 0, "is_running": False, "is_pomodoro": False}
    text = json.dumps(
        {"timers": {"a": {**timer, "id": "b", "name": "first"}, "b": {**timer, "id": "b", "name": "second"}}}
    )
    with pytest.raises(DocumentError, match="more than one record"):
        decode_document(text)


def test_decode_rejects_deeply_nested_json() -> None:
    with pytest.raises(DocumentError):
        decode_document("[" * 200000)


# ---- gateway ----


def test_load_missing_file_is_empty(tmp_path: Path) -> None:
    gw = JsonFileGateway(tmp_path / "nested" / "app_data.json")

    assert gw.load() == AppData()
    assert not (tmp_path / "nested").exists()


def test_load_corrupt_file_falls_back_to_empty(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "app_data.json"
    path.write_text("{ definitely not json", "utf-8")

    with caplog.at_level(logging.ERROR):
        assert JsonFileGateway(path).load() == AppData()
    assert "Failed to load data file" in caplog.text


def test_load_deeply_nested_file_falls_back_to_empty(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "app_data.json"
    path.write_text("[" * 200000, "utf-8")

    with caplog.at_level(logging.ERROR):
        assert JsonFileGateway(path).load() == AppData()
    assert "Failed to load data file" in caplog.text


def test_load_unreadable_path_falls_back_to_empty(tmp_path: Path) -> None:
    path = tmp_path / "app_data.json"
    path.mkdir()
    assert JsonFileGateway(path).load() == AppData()


def test_save_creates_directory_and_replaces_file(tmp_path: Path) -> None:
    path = tmp_path / "a" / "b" / "app_data.json"
    gw = JsonFileGateway(path)
    data = _populated()

    gw.save(AppData())
    gw.save(data)

    assert gw.load() == data
    assert [p.name for p in path.parent.iterdir()] == ["app_data.json"]


def test_save_failure_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", "utf-8")
    gw = JsonFileGateway(blocker / "app_data.json")

    with pytest.raises(PersistenceError):
        gw.save(AppData())


def test_default_data_file_uses_xdg_config_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(gateway_mod.sys, "platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

    assert default_data_file() == tmp_path / "cfg" / "log-manager" / "app_data.json"


@pytest.mark.skipif(sys.platform == "win32", reason="posix home resolution")
def test_default_data_file_falls_back_to_dot_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(gateway_mod.sys, "platform", "linux")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_data_file() == tmp_path / ".config" / "log-manager" / "app_data.json"


@pytest.mark.skipif(sys.platform == "win32", reason="posix home resolution")
def test_default_data_file_on_macos(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gateway_mod.sys, "platform", "darwin")
    monkeypatch.setenv("HOME", str(tmp_path))

    assert default_data_file() == (
        tmp_path / "Library" / "Application Support" / "log-manager" / "app_data.json"
    )
