"""
Task lifecycle: submission, the delayed background completion and the two
read-side projections (status and result).

The manager owns encoding/decoding of records and decides when a record is
mutated; the injected storage owns the bytes and per-key atomicity. The
manager does no locking of its own.
"""

from __future__ import annotations

import logging
import uuid

from ..errors import (
    DecodeError,
    InvalidIdentifier,
    InvalidTransition,
    NotFound,
    NotReady,
    SchedulingError,
    StorageError,
)
from ..storage.base import Storage
from ..storage.schema import TaskRecord, TaskStatus
from .runner import StubRunner
from .spawner import Spawner, ThreadSpawner

logger = logging.getLogger(__name__)


def is_valid_task_id(task_id: str) -> bool:
    try:
        uuid.UUID(task_id)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


class TaskManager:
    def __init__(
        self,
        storage: Storage,
        spawner: Spawner | None = None,
        runner: StubRunner | None = None,
        completion_delay: float = 5.0,
    ):
        self.storage = storage
        self.spawner = spawner or ThreadSpawner()
        self.runner = runner or StubRunner()
        self.completion_delay = completion_delay

    def submit(self, code: str, compiler: str) -> str:
        """
        Store a new in-progress record and schedule its completion.

        Raises StorageWriteError if the initial write fails; in that case
        nothing is scheduled. If scheduling fails the record is deleted again
        and SchedulingError is raised, so no record is left in progress forever.
        """
        task_id = str(uuid.uuid4())
        rec = TaskRecord(id=task_id, code=code, compiler=compiler)
        self.storage.put(task_id, rec.encode())
        try:
            self.spawner.spawn(task_id, self.completion_delay, self.complete)
        except Exception as e:
            logger.error("Error scheduling task %s: %s", task_id, e)
            self._discard(task_id)
            raise SchedulingError(f"Error scheduling task {task_id}: {e}") from e
        logger.info("Task %s submitted (compiler=%r)", task_id, compiler)
        return task_id

    def complete(self, task_id: str) -> None:
        """
        Background step: flip the record to ready with the runner's result.

        Nobody is waiting on this call, so failures are logged and the record
        stays in progress for good.
        """
        try:
            raw = self.storage.get(task_id)
        except (NotFound, StorageError) as e:
            logger.error("Error getting task %s: %s", task_id, e)
            return

        try:
            rec = TaskRecord.decode(raw)
            done = rec.mark_ready(self.runner.run(rec))
        except (DecodeError, InvalidTransition) as e:
            logger.error("Error completing task %s: %s", task_id, e)
            return

        try:
            self.storage.put(task_id, done.encode())
        except StorageError as e:
            logger.error("Error putting task %s: %s", task_id, e)
            return
        logger.info("Task %s ready", task_id)

    def get_status(self, task_id: str) -> TaskStatus:
        return self._load(task_id).status

    def get_result(self, task_id: str) -> str:
        if not is_valid_task_id(task_id):
            raise InvalidIdentifier(task_id)
        rec = self._load(task_id)
        if rec.status != TaskStatus.READY:
            raise NotReady(task_id)
        return rec.result

    def _discard(self, task_id: str) -> None:
        try:
            self.storage.delete(task_id)
        except (NotFound, StorageError) as e:
            logger.error("Error deleting unscheduled task %s: %s", task_id, e)

    def _load(self, task_id: str) -> TaskRecord:
        return TaskRecord.decode(self.storage.get(task_id))
