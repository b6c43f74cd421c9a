"""Shared fixtures for task-cli tests."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from click.testing import CliRunner

from taskcli.store import TaskStore


@pytest.fixture
def cli_runner():
    """Click CLI test runner"""
    return CliRunner()


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point DATA_DIR at a fresh temporary directory."""
    directory = tmp_path / "data"
    directory.mkdir()
    monkeypatch.setenv("DATA_DIR", str(directory))
    return directory


@pytest.fixture
def data_file(data_dir):
    return data_dir / "task.json"


@pytest.fixture
def store(data_file):
    return TaskStore(data_file)


@pytest.fixture
def clock(monkeypatch):
    """Deterministic clock: each call returns one second later than the last."""
    start = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)
    ticks = itertools.count()

    def fake_now() -> str:
        stamp = start + timedelta(seconds=next(ticks))
        return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    monkeypatch.setattr("taskcli.lib.now_iso", fake_now)
    return fake_now
