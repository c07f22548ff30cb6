from taskapi.schemas.task import ResultResponse, ResultSubmission, TaskResponse

__all__ = [
    "ResultResponse",
    "ResultSubmission",
    "TaskResponse",
]
