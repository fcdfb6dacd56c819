import redis
from ..config import settings
from ..errors import NotFound, StorageReadError, StorageWriteError
from .base import Storage

class RedisRepo(Storage):
    def __init__(self, url: str | None = None, client=None):
        self.r = client if client is not None else redis.from_url(url or settings.redis_url, decode_responses=True)

    def _key(self, taskid: str) -> str:
        return f"task:{taskid}"

    def get(self, key: str) -> str:
        try:
            value = self.r.get(self._key(key))
        except redis.RedisError as e:
            raise StorageReadError(f"Error getting task {key}: {e}") from e
        if value is None:
            raise NotFound(key)
        return value

    def put(self, key: str, value: str) -> None:
        try:
            self.r.set(self._key(key), value)
        except redis.RedisError as e:
            raise StorageWriteError(f"Error putting task {key}: {e}") from e

    def post(self, key: str, value: str) -> None:
        try:
            created = self.r.set(self._key(key), value, nx=True)
        except redis.RedisError as e:
            raise StorageWriteError(f"Error posting task {key}: {e}") from e
        if not created:
            raise StorageWriteError(f"Key already exists: {key}")

    def delete(self, key: str) -> None:
        try:
            removed = self.r.delete(self._key(key))
        except redis.RedisError as e:
            raise StorageWriteError(f"Error deleting task {key}: {e}") from e
        if not removed:
            raise NotFound(key)
