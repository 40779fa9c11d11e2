"""
Error taxonomy.

The data layer raises ``DataAccessFailure``; services catch it at their own
boundary and re-raise a ``WebFailure`` carrying the HTTP status and the
short error token rendered to clients as ``{"error": <token>}``.
"""

# Error tokens
NOT_FOUND = "not.found"
NOT_OWNER_OF_QUESTION = "not.owner.of.question"
ANSWER_REQUIRED = "answer.required"
ANSWER_NOT_CREATED = "answer.not.created"
ANSWER_NOT_UPDATED = "answer.not.updated"
ANSWER_NOT_ACCEPTED = "answer.not.accepted"
FAILED_TO_GET_ANSWERS = "failed.to.get.answers"
FAILED_TO_ADD_QUESTION = "failed.to.add.question.to.database"
FAILED_TO_GET_LATEST_QUESTIONS = "failed.to.get.latest.questions"
FAILED_TO_SEARCH_FOR_QUESTIONS = "failed.to.search.for.questions"
FAILED_TO_SEARCH_FOR_TAGS = "failed.to.search.for.tags"
FAILED_TO_VOTE = "failed.to.vote"
INTERNAL_ERROR = "internal.error"
UNAUTHORIZED = "unauthorized"


class DataAccessFailure(Exception):
    """A data-layer operation failed; ``cause`` holds the driver error."""

    def __init__(self, description: str, cause: BaseException | None = None) -> None:
        super().__init__(f"{description} failed: {cause}")
        self.description = description
        self.cause = cause


class OperationAlreadyExecuted(RuntimeError):
    """A pending operation was dispatched more than once."""


class WebFailure(Exception):
    status_code: int = 500

    def __init__(self, token: str, cause: BaseException | None = None) -> None:
        super().__init__(token)
        self.token = token
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.token!r})"


class BadRequest(WebFailure):
    status_code = 400


class Unauthorized(WebFailure):
    status_code = 401


class NotFound(WebFailure):
    status_code = 404

    def __init__(self, token: str = NOT_FOUND, cause: BaseException | None = None) -> None:
        super().__init__(token, cause)


class InternalFailure(WebFailure):
    status_code = 500
