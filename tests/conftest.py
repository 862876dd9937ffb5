# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

import pytest

from gantt_server.app import create_app
from gantt_server.data import Task, default_tasks
from gantt_server.json_store import JsonTaskStore

from .fakes import FakeTaskStore

# Fixed anchor so seeded dates never depend on the day the suite runs.
TODAY = date(2025, 6, 15)


def fixed_defaults() -> List[Task]:
    return default_tasks(TODAY)


@pytest.fixture()
def sample_tasks() -> List[Task]:
    """Two tasks whose priority order is the reverse of their insertion order."""
    return [
        Task(101, "Test task A", "2026-02-01", 3, "#AAAAAA", 5),
        Task(102, "Test task B", "2026-02-04", 2, "#BBBBBB", 1),
    ]


@pytest.fixture()
def json_store(tmp_path: Path) -> JsonTaskStore:
    return JsonTaskStore(tmp_path / "tasks.json", seed=fixed_defaults)


@pytest.fixture()
def sql_app(tmp_path: Path):
    """App wired to a real SQLite file under tmp_path."""
    app = create_app(
        {
            "TESTING": True,
            "TASK_STORAGE": "sqlite",
            "TASKS_DB_PATH": str(tmp_path / "gantt.db"),
        }
    )
    yield app
    app.extensions["task_store"].close()


@pytest.fixture()
def json_app(tmp_path: Path):
    return create_app(
        {
            "TESTING": True,
            "TASK_STORAGE": "json",
            "TASKS_JSON_PATH": str(tmp_path / "tasks.json"),
        }
    )


@pytest.fixture()
def fake_store(sample_tasks: List[Task]) -> FakeTaskStore:
    return FakeTaskStore(sample_tasks)


@pytest.fixture()
def client(fake_store: FakeTaskStore):
    """Test client whose app talks to the in-memory fake store."""
    app = create_app({"TESTING": True}, store=fake_store)
    return app.test_client()
