"""Error taxonomy for token handling and task validation.

Token-layer errors (``AuthError``, ``SigningError``) are raised by the token
service. The challenge service translates them into the service-level errors
below, which the router maps onto HTTP status codes:

- ``UnauthorizedError``    -> 401
- ``TaskNotFoundError``    -> 404
- ``IncorrectResultError`` -> 401, discloses the expected value
- ``InternalError``        -> 500
"""


class ChallengeError(Exception):
    """Base class for every error raised by the challenge protocol."""


class AuthError(ChallengeError):
    """Token is malformed, carries a bad signature, or is outside its validity window."""


class SigningError(ChallengeError):
    """A token could not be signed."""


class UnauthorizedError(ChallengeError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)


class TaskNotFoundError(ChallengeError):
    def __init__(self, task_id: str):
        super().__init__("task id not found")
        self.task_id = task_id


class IncorrectResultError(ChallengeError):
    def __init__(self, expected: int):
        super().__init__("incorrect result")
        self.expected = expected


class InternalError(ChallengeError):
    pass
