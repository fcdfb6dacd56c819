import os
from functools import lru_cache
from celery import Celery

celery_app = Celery(
    "taskapi",
    broker=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
    backend=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
)

@lru_cache(maxsize=1)
def build_manager():
    """One manager (and one Redis pool) per worker process."""
    from taskapi.config import settings
    from taskapi.services.lifecycle import TaskManager
    from taskapi.services.runner import StubRunner
    from taskapi.storage.repo import RedisRepo
    # completion runs here; the worker never spawns further jobs
    return TaskManager(
        storage=RedisRepo(settings.redis_url),
        runner=StubRunner(settings.result_text),
        completion_delay=settings.completion_delay_seconds,
    )

@celery_app.task(name="complete_task")
def complete_task(task_id: str) -> None:
    build_manager().complete(task_id)
