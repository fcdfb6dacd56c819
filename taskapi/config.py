from pydantic import BaseModel, ConfigDict, Field, field_validator
import os

def _env(name: str, default: str | None = None):
    return Field(default_factory=lambda: os.getenv(name, default))

class Settings(BaseModel):
    """Every ``Settings()`` re-reads the environment; ``settings`` below is the one read at import."""
    model_config = ConfigDict(validate_default=True)

    addr: str = _env("TASKAPI_ADDR", ":8080")
    completion_delay_seconds: float = _env("TASKAPI_COMPLETION_DELAY_SECONDS", "5.0")
    storage: str = _env("TASKAPI_STORAGE", "memory")  # memory | redis
    spawner: str = _env("TASKAPI_SPAWNER", "thread")  # thread | celery
    redis_url: str = _env("REDIS_URL", "redis://localhost:6379/0")
    log_level: str = _env("TASKAPI_LOG_LEVEL", "INFO")
    log_file: str | None = _env("TASKAPI_LOG_FILE")
    result_text: str = _env("TASKAPI_RESULT_TEXT", "Task completed successfully.")

    @field_validator("storage", "spawner")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("completion_delay_seconds")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("completion delay must not be negative")
        return v

    def host_port(self) -> tuple[str, int]:
        host, _, port = self.addr.rpartition(":")
        if not port:
            raise ValueError(f"Address must be host:port, got {self.addr!r}")
        return host or "0.0.0.0", int(port)


settings = Settings()
