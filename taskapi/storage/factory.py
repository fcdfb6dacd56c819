from __future__ import annotations

from ..config import Settings
from .base import Storage
from .memory import InMemoryStorage


def build_storage(settings: Settings) -> Storage:
    if settings.storage == "memory":
        return InMemoryStorage()
    if settings.storage == "redis":
        from .repo import RedisRepo

        return RedisRepo(settings.redis_url)
    raise ValueError(f"Unsupported storage backend: {settings.storage}")
