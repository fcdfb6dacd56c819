import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from taskapi.errors import (
    DecodeError,
    InvalidInput,
    NotFound,
    NotReady,
    SchedulingError,
    StorageWriteError,
)
from taskapi.services.lifecycle import TaskManager, is_valid_task_id
from taskapi.services.spawner import ThreadSpawner
from taskapi.storage.memory import InMemoryStorage
from taskapi.storage.schema import TaskRecord, TaskStatus

UNISSUED = "00000000-0000-0000-0000-000000000000"


class FailingWrites(InMemoryStorage):
    def put(self, key, value):
        raise StorageWriteError("disk full")


class CountingStorage(InMemoryStorage):
    def __init__(self):
        super().__init__()
        self.reads = 0

    def get(self, key):
        self.reads += 1
        return super().get(key)


def test_submit_returns_uuid_and_stores_in_progress_record(manager, storage, spawner):
    task_id = manager.submit("print(1)", "py")

    assert len(task_id) == 36
    assert uuid.UUID(task_id).version == 4
    rec = TaskRecord.decode(storage.get(task_id))
    assert rec == TaskRecord(id=task_id, code="print(1)", compiler="py")
    assert [(t, d) for t, d, _ in spawner.pending] == [(task_id, 5.0)]


def test_status_right_after_submit_is_in_progress(manager):
    task_id = manager.submit("print(1)", "py")

    assert manager.get_status(task_id) == TaskStatus.IN_PROGRESS


def test_result_is_not_ready_before_completion(manager):
    task_id = manager.submit("print(1)", "py")

    with pytest.raises(NotReady):
        manager.get_result(task_id)


def test_completion_makes_result_available(manager, spawner):
    task_id = manager.submit("print(1)", "py")
    spawner.run_all()

    assert manager.get_status(task_id) == TaskStatus.READY
    assert manager.get_result(task_id) == "Task completed successfully."


def test_unknown_ids_are_not_found(manager):
    with pytest.raises(NotFound):
        manager.get_status(UNISSUED)
    with pytest.raises(NotFound):
        manager.get_result(UNISSUED)


def test_malformed_id_fails_before_storage_lookup(spawner):
    storage = CountingStorage()
    manager = TaskManager(storage=storage, spawner=spawner)

    with pytest.raises(InvalidInput):
        manager.get_result("not-a-uuid")
    assert storage.reads == 0


@pytest.mark.parametrize("task_id", ["", "not-a-uuid", "1234", UNISSUED + "0"])
def test_is_valid_task_id_rejects(task_id):
    assert not is_valid_task_id(task_id)


def test_is_valid_task_id_accepts_uuid4():
    assert is_valid_task_id(str(uuid.uuid4()))


def test_status_does_not_validate_identifier_format(manager):
    with pytest.raises(NotFound):
        manager.get_status("not-a-uuid")


def test_failed_submit_write_is_surfaced_and_nothing_spawned(spawner):
    manager = TaskManager(storage=FailingWrites(), spawner=spawner)

    with pytest.raises(StorageWriteError):
        manager.submit("print(1)", "py")
    assert spawner.pending == []


class BrokerDown:
    def spawn(self, task_id, delay, completion):
        raise ConnectionError("broker unreachable")


def test_failed_spawn_rolls_back_the_record(storage, caplog):
    manager = TaskManager(storage=storage, spawner=BrokerDown())

    with caplog.at_level(logging.ERROR, logger="taskapi.services.lifecycle"):
        with pytest.raises(SchedulingError) as exc_info:
            manager.submit("print(1)", "py")

    assert isinstance(exc_info.value, StorageWriteError)
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert len(storage) == 0
    assert "broker unreachable" in caplog.text


def test_corrupt_record_fails_reads(manager, storage):
    task_id = str(uuid.uuid4())
    storage.put(task_id, "{broken")

    with pytest.raises(DecodeError):
        manager.get_status(task_id)
    with pytest.raises(DecodeError):
        manager.get_result(task_id)


def test_completion_of_missing_record_is_logged_only(manager, caplog):
    with caplog.at_level(logging.ERROR, logger="taskapi.services.lifecycle"):
        manager.complete(UNISSUED)

    assert UNISSUED in caplog.text


def test_completion_of_corrupt_record_leaves_it_untouched(manager, storage, caplog):
    task_id = str(uuid.uuid4())
    storage.put(task_id, "{broken")

    with caplog.at_level(logging.ERROR, logger="taskapi.services.lifecycle"):
        manager.complete(task_id)

    assert storage.get(task_id) == "{broken"
    assert task_id in caplog.text


def test_completion_runs_only_once(manager, storage, spawner):
    task_id = manager.submit("print(1)", "py")
    spawner.run_all()
    before = storage.get(task_id)

    manager.complete(task_id)

    assert storage.get(task_id) == before


def test_completion_write_failure_is_not_raised(spawner):
    storage = InMemoryStorage()
    manager = TaskManager(storage=storage, spawner=spawner)
    task_id = manager.submit("print(1)", "py")

    def refuse(key, value):
        raise StorageWriteError("read-only")

    storage.put = refuse
    spawner.run_all()

    assert manager.get_status(task_id) == TaskStatus.IN_PROGRESS


def test_concurrent_submissions_get_distinct_ids(manager, spawner):
    codes = [f"print({i})" for i in range(50)]

    with ThreadPoolExecutor(max_workers=10) as pool:
        ids = list(pool.map(lambda c: manager.submit(c, "py"), codes))

    assert len(set(ids)) == len(ids)
    spawner.run_all()
    for task_id, code in zip(ids, codes):
        rec = TaskRecord.decode(manager.storage.get(task_id))
        assert rec.code == code
        assert rec.status == TaskStatus.READY


def test_thread_spawner_completes_after_delay():
    manager = TaskManager(storage=InMemoryStorage(), spawner=ThreadSpawner(), completion_delay=0.05)
    task_id = manager.submit("print(1)", "py")

    assert manager.get_status(task_id) == TaskStatus.IN_PROGRESS

    deadline = time.time() + 5
    while manager.get_status(task_id) != TaskStatus.READY and time.time() < deadline:
        time.sleep(0.01)

    assert manager.get_status(task_id) == TaskStatus.READY
    assert manager.get_result(task_id) == "Task completed successfully."
