import time
from collections.abc import Callable

import structlog

from taskapi.exceptions import (
    AuthError,
    IncorrectResultError,
    InternalError,
    SigningError,
    TaskNotFoundError,
    UnauthorizedError,
)
from taskapi.models.task import ChallengeRecord, IssuedTask
from taskapi.services.task_generator import TaskGenerator
from taskapi.services.task_store import TaskStore
from taskapi.services.token_service import TokenAuthority

logger = structlog.get_logger()


class ChallengeService:
    """
    Issues tasks and validates submitted results.

    One instance lives for the whole process and is shared by every request
    handler. The signing key inside ``tokens`` never changes; ``store`` is the
    only mutable state.
    """

    def __init__(
        self,
        tokens: TokenAuthority | None = None,
        generator: TaskGenerator | None = None,
        store: TaskStore | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.tokens = tokens if tokens is not None else TokenAuthority()
        self.generator = generator if generator is not None else TaskGenerator()
        self.store = store if store is not None else TaskStore()
        self._clock = clock

    def new_task(self) -> IssuedTask:
        """
        Issue a new task.

        Raises InternalError if the token cannot be signed.
        """
        try:
            token = self.tokens.issue()
        except SigningError as e:
            logger.error("token_signing_failed", error=str(e))
            raise InternalError(str(e)) from e

        task, expected = self.generator.generate()
        record = ChallengeRecord(
            task=task,
            expected_result=expected,
            token=token,
            created_at=self._clock(),
        )
        self.store.insert(task.id, record)

        logger.info(
            "task_issued",
            task_id=task.id,
            op=task.operation.value,
            operand_count=len(task.operands),
        )

        return IssuedTask(
            task_id=task.id,
            token=token,
            operation=task.operation,
            operands=task.operands,
        )

    def validate_result(self, task_id: str, token: str, submitted_result: int) -> int:
        """
        Check a submitted result for ``task_id``.

        The token is checked first and independently of the task id: any fresh
        token authorizes any known task. Validation does not consume the task.

        Returns the expected result on success. Raises UnauthorizedError,
        TaskNotFoundError or IncorrectResultError.
        """
        try:
            self.tokens.verify(token)
        except AuthError:
            logger.info("task_validation_failed", task_id=task_id, reason="unauthorized")
            raise UnauthorizedError()

        record = self.store.get(task_id)
        if record is None:
            logger.info("task_validation_failed", task_id=task_id, reason="not_found")
            raise TaskNotFoundError(task_id)

        if record.expected_result != submitted_result:
            logger.info("task_validation_failed", task_id=task_id, reason="incorrect_result")
            raise IncorrectResultError(record.expected_result)

        logger.info("task_validated", task_id=task_id)
        return record.expected_result

    def evict_expired(self, max_age_seconds: float) -> int:
        """Drop tasks issued more than ``max_age_seconds`` ago."""
        evicted = self.store.evict_older_than(max_age_seconds, now=self._clock())
        if evicted:
            logger.info("tasks_evicted", count=evicted, remaining=len(self.store))
        return evicted
