import enum
from collections.abc import Sequence
from dataclasses import dataclass

INT8_MIN = -128
INT8_MAX = 127


class Operation(str, enum.Enum):
    """Reducer applied to a task's operands."""

    MAX = "Max"
    MIN = "Min"

    def apply(self, operands: Sequence[int]) -> int:
        """Reduce ``operands`` to a single value.

        Raises ValueError on an empty sequence; generated tasks never have one.
        """
        if not operands:
            raise ValueError(f"{self.value} requires at least one operand")
        if self is Operation.MAX:
            return max(operands)
        return min(operands)


@dataclass(frozen=True)
class Task:
    id: str
    operation: Operation
    operands: tuple[int, ...]


@dataclass(frozen=True)
class ChallengeRecord:
    """Server-side record pairing a task with its precomputed answer."""

    task: Task
    expected_result: int
    token: str
    created_at: float


@dataclass(frozen=True)
class IssuedTask:
    """Client-facing view of a task. Carries the token, never the expected result."""

    task_id: str
    token: str
    operation: Operation
    operands: tuple[int, ...]
