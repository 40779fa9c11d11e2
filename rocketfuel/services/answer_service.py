"""
Answer service: the answer-side operations.

Two flows carry side effects:

- ``answer_question`` hands the stored answer to the
  ``NotificationPublisher`` as a detached task.  The request never waits
  for it and never sees its failures.
- ``mark_as_accepted_answer`` flips ``answer.accepted`` and
  ``question.answered`` together through the ``TransactionCoordinator``,
  so either both rows change or neither does.
"""
import logging

from rocketfuel.dao.answer_dao import AnswerDao
from rocketfuel.dao.question_dao import QuestionDao
from rocketfuel.errors import (
    ANSWER_NOT_ACCEPTED,
    ANSWER_NOT_CREATED,
    ANSWER_NOT_UPDATED,
    ANSWER_REQUIRED,
    FAILED_TO_GET_ANSWERS,
    FAILED_TO_VOTE,
    NOT_OWNER_OF_QUESTION,
    BadRequest,
    DataAccessFailure,
    InternalFailure,
    NotFound,
)
from rocketfuel.notifications import NotificationPublisher
from rocketfuel.schemas import Answer, AnswerCreate, Auth
from rocketfuel.transactions import TransactionCoordinator

logger = logging.getLogger(__name__)


def _require_body(answer: AnswerCreate) -> None:
    if answer.answer is None or not answer.answer.strip():
        raise BadRequest(ANSWER_REQUIRED)


class AnswerService:

    def __init__(
        self,
        answer_dao: AnswerDao,
        question_dao: QuestionDao,
        transactions: TransactionCoordinator,
        notifications: NotificationPublisher,
    ) -> None:
        self.answer_dao = answer_dao
        self.question_dao = question_dao
        self.transactions = transactions
        self.notifications = notifications

    async def answer_question(self, auth: Auth, answer: AnswerCreate, question_id: int) -> Answer:
        _require_body(answer)

        try:
            key = await self.answer_dao.create_answer(auth.user_id, question_id, answer)
        except DataAccessFailure as exc:
            logger.error("Failed to create answer on question %s", question_id, exc_info=True)
            raise InternalFailure(ANSWER_NOT_CREATED, exc) from exc

        created = Answer(
            id=key.key,
            user_id=auth.user_id,
            question_id=question_id,
            title=answer.title,
            answer=answer.answer,
            slack_thread_id=answer.slack_thread_id,
            created_at=key.created_at,
        )
        self.notifications.dispatch(created, question_id)
        return created

    async def update_answer(
        self, auth: Auth, question_id: int, answer_id: int, answer: AnswerCreate
    ) -> Answer:
        """Rewrite an answer; only its author can, anyone else gets answer.not.updated."""
        _require_body(answer)

        try:
            updated = await self.answer_dao.update_answer(
                auth.user_id, question_id, answer_id, answer
            )
        except DataAccessFailure as exc:
            logger.error("Failed to update answer %s", answer_id, exc_info=True)
            raise InternalFailure(ANSWER_NOT_UPDATED, exc) from exc
        if updated == 0:
            raise BadRequest(ANSWER_NOT_UPDATED)

        return await self.answer_dao.get_answer_by_id(answer_id).first()

    async def get_answers(self, question_id: int) -> list[Answer]:
        try:
            return await self.answer_dao.get_answers(question_id).to_list()
        except DataAccessFailure as exc:
            logger.error("Failed to get answers for question: %s", question_id, exc_info=True)
            raise InternalFailure(FAILED_TO_GET_ANSWERS, exc) from exc

    async def get_answer_by_slack_id(self, slack_id: str) -> Answer:
        answer = await self.answer_dao.get_answer(slack_id).first()
        if answer is None:
            raise NotFound()
        return answer

    async def up_vote_answer(self, thread_id: str) -> None:
        await self._vote(self.answer_dao.up_vote_answer(thread_id), thread_id)

    async def down_vote_answer(self, thread_id: str) -> None:
        await self._vote(self.answer_dao.down_vote_answer(thread_id), thread_id)

    async def _vote(self, operation, thread_id: str) -> None:
        try:
            await operation
        except DataAccessFailure as exc:
            logger.error("Vote on answer in thread %s failed", thread_id, exc_info=True)
            raise InternalFailure(FAILED_TO_VOTE, exc) from exc

    async def mark_as_accepted_answer(self, auth: Auth, answer_id: int) -> None:
        answer = await self.answer_dao.get_answer_by_id(answer_id).first()
        if answer is None:
            raise NotFound()
        if answer.question.user_id != auth.user_id:
            raise BadRequest(NOT_OWNER_OF_QUESTION)

        try:
            await self.transactions.execute_transaction(
                self.answer_dao.mark_as_accepted(answer_id),
                self.question_dao.mark_as_answered(auth.user_id, answer.question_id),
            )
        except DataAccessFailure as exc:
            logger.error(
                "Failed to accept answer %s on question %s", answer_id, answer.question_id,
                exc_info=True,
            )
            raise InternalFailure(ANSWER_NOT_ACCEPTED, exc) from exc
