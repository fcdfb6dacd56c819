from pydantic import BaseModel, ConfigDict, field_validator

class TaskRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    code: str = ""
    compiler: str = ""

    @field_validator("code", "compiler", mode="before")
    @classmethod
    def _null_is_empty(cls, v):
        return "" if v is None else v

class TaskResponse(BaseModel):
    task_id: str

class StatusResponse(BaseModel):
    status: str  # in_progress | ready

class ResultResponse(BaseModel):
    result: str
