from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

Completion = Callable[[str], None]


@runtime_checkable
class Spawner(Protocol):
    """
    Schedules the detached completion step for one task.

    There is no handle to join or cancel: once spawned, the completion runs
    to the end on its own.
    """

    def spawn(self, task_id: str, delay: float, completion: Completion) -> None: ...


class ThreadSpawner(Spawner):
    """Runs the completion in-process on a daemon timer thread."""

    def spawn(self, task_id: str, delay: float, completion: Completion) -> None:
        timer = threading.Timer(delay, completion, args=(task_id,))
        timer.name = f"complete-{task_id}"
        timer.daemon = True
        timer.start()


class CelerySpawner(Spawner):
    """
    Hands the completion to the Celery worker. The worker owns its own
    storage, so this only works with a shared backend (Redis).
    """

    def spawn(self, task_id: str, delay: float, completion: Completion) -> None:
        from taskworker.celery_app import complete_task

        async_result = complete_task.apply_async(args=[task_id], countdown=delay)
        logger.debug("Queued completion for task %s as celery job %s", task_id, async_result.id)


def build_spawner(kind: str) -> Spawner:
    if kind == "thread":
        return ThreadSpawner()
    if kind == "celery":
        return CelerySpawner()
    raise ValueError(f"Unsupported spawner: {kind}")
