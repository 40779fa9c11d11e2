from fastapi import Header, Request

from rocketfuel.container import Container
from rocketfuel.errors import UNAUTHORIZED, Unauthorized
from rocketfuel.schemas import Auth
from rocketfuel.services.answer_service import AnswerService
from rocketfuel.services.question_service import QuestionService
from rocketfuel.services.tag_service import TagService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_question_service(request: Request) -> QuestionService:
    return get_container(request).question_service


def get_answer_service(request: Request) -> AnswerService:
    return get_container(request).answer_service


def get_tag_service(request: Request) -> TagService:
    return get_container(request).tag_service


def get_auth(x_auth_user_id: str | None = Header(None)) -> Auth:
    """
    The caller's principal.

    Bearer tokens are validated by the authenticating gateway in front of
    this service, which forwards the resolved user id in
    ``X-Auth-User-Id``.  Handlers that mutate on behalf of a user depend on
    this; read-only handlers do not.
    """
    if not x_auth_user_id:
        raise Unauthorized(UNAUTHORIZED)
    try:
        return Auth(user_id=int(x_auth_user_id))
    except ValueError:
        raise Unauthorized(UNAUTHORIZED)
