class TaskError(Exception):
    """Base class for every error raised by the task core."""


class InvalidInput(TaskError):
    pass


class InvalidIdentifier(InvalidInput):
    def __init__(self, task_id: str):
        super().__init__(f"Invalid task_id parameter: {task_id!r}")
        self.task_id = task_id


class NotFound(TaskError):
    def __init__(self, key: str):
        super().__init__(f"Task not found: {key}")
        self.key = key


class NotReady(TaskError):
    def __init__(self, task_id: str):
        super().__init__("Task is not ready")
        self.task_id = task_id


class InvalidTransition(TaskError):
    pass


class DecodeError(TaskError):
    pass


class StorageError(TaskError):
    pass


class StorageWriteError(StorageError):
    pass


class StorageReadError(StorageError):
    pass


class SchedulingError(StorageWriteError):
    """The completion could not be scheduled; the submitted record was rolled back."""
