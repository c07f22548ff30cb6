from taskapi.models.task import (
    INT8_MAX,
    INT8_MIN,
    ChallengeRecord,
    IssuedTask,
    Operation,
    Task,
)

__all__ = [
    "INT8_MAX",
    "INT8_MIN",
    "ChallengeRecord",
    "IssuedTask",
    "Operation",
    "Task",
]
