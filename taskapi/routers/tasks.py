import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from ..errors import DecodeError, InvalidInput, NotFound, NotReady, StorageError
from ..models import TaskRequest, TaskResponse, StatusResponse, ResultResponse
from ..services.lifecycle import TaskManager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["task"])

def get_manager(request: Request) -> TaskManager:
    return request.app.state.manager

def _require_task_id(task_id: str | None) -> str:
    if not task_id:
        raise HTTPException(status_code=400, detail="task_id not provided")
    return task_id

@router.post(
    "/task",
    response_model=TaskResponse,
    status_code=201,
    summary="Create a new task",
    description="Creates a new task with given code and compiler.",
    responses={400: {"description": "Bad request"}, 500: {"description": "Internal server error"}},
)
def new_task(payload: TaskRequest, manager: TaskManager = Depends(get_manager)):
    try:
        task_id = manager.submit(payload.code, payload.compiler)
    except StorageError as e:
        logger.error("Failed to store new task: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return TaskResponse(task_id=task_id)

@router.get(
    "/status",
    response_model=StatusResponse,
    summary="Get task status",
    description="Gets the status of a task by its ID.",
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Task not found"},
        500: {"description": "Internal server error"},
    },
)
def get_status(task_id: str | None = Query(default=None), manager: TaskManager = Depends(get_manager)):
    task_id = _require_task_id(task_id)
    try:
        status = manager.get_status(task_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (DecodeError, StorageError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return StatusResponse(status=status.value)

@router.get(
    "/result",
    response_model=ResultResponse,
    summary="Get task result",
    description="Gets the result of a task by its ID.",
    responses={
        400: {"description": "Bad request"},
        404: {"description": "Task not found or not ready"},
        500: {"description": "Internal server error"},
    },
)
def get_result(task_id: str | None = Query(default=None), manager: TaskManager = Depends(get_manager)):
    task_id = _require_task_id(task_id)
    try:
        result = manager.get_result(task_id)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    # unknown and unfinished tasks look the same to the caller
    except (NotFound, NotReady) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (DecodeError, StorageError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ResultResponse(result=result)
