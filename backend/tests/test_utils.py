"""Shared test utilities."""

import uuid

from taskapi.models.task import INT8_MAX, ChallengeRecord, Operation, Task

START_TIME = 1_700_000_000.0


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FixedGenerator:
    """Task generator stand-in that always hands out the same operation and operands."""

    def __init__(self, operation: Operation, operands: list[int]):
        self.operation = operation
        self.operands = tuple(operands)

    def generate(self) -> tuple[Task, int]:
        task = Task(id=str(uuid.uuid4()), operation=self.operation, operands=self.operands)
        return task, self.operation.apply(self.operands)


def make_record(operation: Operation, operands: list[int], created_at: float = START_TIME):
    """Build a ChallengeRecord with a fresh id and a correct expected result."""
    task = Task(id=str(uuid.uuid4()), operation=operation, operands=tuple(operands))
    return ChallengeRecord(
        task=task,
        expected_result=operation.apply(task.operands),
        token="unused",
        created_at=created_at,
    )


def solve(task_json: dict) -> int:
    """Compute the answer to a task as returned by GET /api/tasks."""
    return Operation(task_json["op"]).apply(task_json["args"])


def wrong_answer(correct: int) -> int:
    return correct - 1 if correct == INT8_MAX else correct + 1
