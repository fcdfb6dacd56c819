# tests/conftest.py

from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from taskapi.services.lifecycle import TaskManager
from taskapi.storage.memory import InMemoryStorage


class ManualSpawner:
    """
    Records spawned completions instead of starting timers, so tests decide
    when the "delay" has elapsed by calling run_all().
    """

    def __init__(self) -> None:
        self.pending: list[tuple[str, float, object]] = []

    def spawn(self, task_id, delay, completion) -> None:
        self.pending.append((task_id, delay, completion))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for task_id, _, completion in pending:
            completion(task_id)


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def spawner() -> ManualSpawner:
    return ManualSpawner()


@pytest.fixture()
def manager(storage: InMemoryStorage, spawner: ManualSpawner) -> TaskManager:
    return TaskManager(storage=storage, spawner=spawner, completion_delay=5.0)
