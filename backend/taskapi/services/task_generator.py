import random
import uuid

from taskapi.models.task import INT8_MAX, INT8_MIN, Operation, Task

MAX_OPERAND_COUNT = 255  # largest value of a single unsigned byte


class TaskGenerator:
    """Produces random tasks. Pass a seeded ``random.Random`` for reproducible output."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng if rng is not None else random.Random()

    def _operand_count(self) -> int:
        # A byte-sized draw of zero would leave the reducer with nothing to reduce
        while True:
            count = self._rng.randint(0, MAX_OPERAND_COUNT)
            if count > 0:
                return count

    def _task_id(self) -> str:
        return str(uuid.UUID(int=self._rng.getrandbits(128), version=4))

    def generate(self) -> tuple[Task, int]:
        """Generate a new task and its expected result."""
        operation = self._rng.choice(list(Operation))
        operands = tuple(
            self._rng.randint(INT8_MIN, INT8_MAX) for _ in range(self._operand_count())
        )
        task = Task(id=self._task_id(), operation=operation, operands=operands)
        return task, operation.apply(operands)
