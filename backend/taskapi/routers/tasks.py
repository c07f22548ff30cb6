import structlog
from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from taskapi.exceptions import (
    IncorrectResultError,
    InternalError,
    TaskNotFoundError,
    UnauthorizedError,
)
from taskapi.schemas.task import ResultResponse, ResultSubmission, TaskResponse
from taskapi.services.challenge_service import ChallengeService

router = APIRouter()
logger = structlog.get_logger()

MISSING_AUTHORIZATION = "must provide an Authorization header with a valid token"


def get_challenge_service(request: Request) -> ChallengeService:
    """Dependency returning the process-wide challenge service."""
    return request.app.state.challenge_service


def extract_token(authorization: str | None) -> str | None:
    """Return the last whitespace-delimited segment of the Authorization header.

    Any scheme is accepted ("Bearer <t>", "Token <t>", or a bare "<t>").
    """
    if authorization is None:
        return None
    segments = authorization.split()
    if not segments:
        return None
    return segments[-1]


def result_response(status_code: int, body: ResultResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/tasks", response_model=TaskResponse)
async def get_task(service: ChallengeService = Depends(get_challenge_service)):
    """Issue a new task together with the token needed to answer it."""
    try:
        issued = service.new_task()
    except UnauthorizedError as e:
        return result_response(401, ResultResponse(success=False, error=str(e)))
    except InternalError as e:
        return result_response(500, ResultResponse(success=False, error=str(e)))

    return TaskResponse.from_issued(issued)


@router.post(
    "/tasks/{task_id}",
    response_model=ResultResponse,
    responses={
        401: {"model": ResultResponse},
        403: {"model": ResultResponse},
        404: {"model": ResultResponse},
        500: {"model": ResultResponse},
    },
)
async def submit_result(
    task_id: str,
    submission: ResultSubmission,
    authorization: str | None = Header(default=None),
    service: ChallengeService = Depends(get_challenge_service),
):
    """
    Submit the answer to a previously issued task.

    Requires a fresh token in the Authorization header. A wrong answer
    reports the expected value and leaves the task open for another attempt.
    """
    token = extract_token(authorization)
    if token is None:
        return result_response(
            403, ResultResponse(success=False, error=MISSING_AUTHORIZATION)
        )

    received = submission.result
    try:
        service.validate_result(task_id, token, received)
    except UnauthorizedError as e:
        return result_response(401, ResultResponse(success=False, error=str(e)))
    except TaskNotFoundError as e:
        return result_response(404, ResultResponse(success=False, error=str(e)))
    except IncorrectResultError as e:
        return result_response(
            401,
            ResultResponse(
                success=False, error=str(e), received=received, expected=e.expected
            ),
        )
    except InternalError as e:
        logger.error("task_validation_error", task_id=task_id, error=str(e))
        return result_response(500, ResultResponse(success=False, error=str(e)))

    return ResultResponse(success=True, received=received, expected=received)
