from pydantic import BaseModel, Field

from taskapi.models.task import INT8_MAX, INT8_MIN, IssuedTask, Operation


class TaskResponse(BaseModel):
    task_id: str
    token: str
    op: Operation
    args: list[int]

    @classmethod
    def from_issued(cls, issued: IssuedTask) -> "TaskResponse":
        return cls(
            task_id=issued.task_id,
            token=issued.token,
            op=issued.operation,
            args=list(issued.operands),
        )


class ResultSubmission(BaseModel):
    result: int = Field(..., ge=INT8_MIN, le=INT8_MAX, strict=True, description="int8 answer")


class ResultResponse(BaseModel):
    success: bool
    error: str | None = None
    received: int | None = None
    expected: int | None = None
