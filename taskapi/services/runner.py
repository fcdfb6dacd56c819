from ..storage.schema import TaskRecord


class StubRunner:
    """Stand-in for a compiler backend: every task succeeds with the same text."""

    def __init__(self, result_text: str = "Task completed successfully."):
        self.result_text = result_text

    def run(self, rec: TaskRecord) -> str:
        # rec.code / rec.compiler are accepted as-is; nothing is executed
        return self.result_text
