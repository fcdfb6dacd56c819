from enum import Enum

import orjson
from pydantic import BaseModel, ValidationError, model_validator

from ..errors import DecodeError, InvalidTransition

class TaskStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    READY = "ready"

class TaskRecord(BaseModel):
    id: str
    code: str = ""
    compiler: str = ""
    status: TaskStatus = TaskStatus.IN_PROGRESS
    result: str = ""  # empty until status is READY

    @model_validator(mode="after")
    def _no_early_result(self):
        if self.status == TaskStatus.IN_PROGRESS and self.result:
            raise ValueError("result must be empty while the task is in progress")
        return self

    def mark_ready(self, result: str) -> "TaskRecord":
        if self.status != TaskStatus.IN_PROGRESS:
            raise InvalidTransition(f"Task {self.id} is already {self.status.value}")
        return self.model_copy(update={"status": TaskStatus.READY, "result": result})

    def encode(self) -> str:
        return orjson.dumps(self.model_dump(mode="json")).decode()

    @classmethod
    def decode(cls, raw: str | bytes) -> "TaskRecord":
        try:
            return cls.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise DecodeError(f"Error unmarshalling task: {e}") from e
