"""
Question service: the question-side operations.

Data-layer failures are caught here and re-raised as ``WebFailure``
subclasses carrying the error token the HTTP edge renders.
"""
import logging

from rocketfuel.config import Settings
from rocketfuel.dao.question_dao import QuestionDao, clean_tag_names
from rocketfuel.errors import (
    FAILED_TO_ADD_QUESTION,
    FAILED_TO_GET_LATEST_QUESTIONS,
    FAILED_TO_SEARCH_FOR_QUESTIONS,
    FAILED_TO_VOTE,
    DataAccessFailure,
    InternalFailure,
    NotFound,
)
from rocketfuel.schemas import Auth, Question, QuestionCreate

logger = logging.getLogger(__name__)


class QuestionService:

    def __init__(self, question_dao: QuestionDao, config: Settings) -> None:
        self.question_dao = question_dao
        self.default_latest_limit = config.DEFAULT_LATEST_LIMIT
        self.default_search_limit = config.DEFAULT_SEARCH_LIMIT

    async def create_question(self, auth: Auth, question: QuestionCreate) -> Question:
        try:
            key = await self.question_dao.add_question(auth.user_id, question)
        except DataAccessFailure as exc:
            logger.error("Failed to add question for user %s", auth.user_id, exc_info=True)
            raise InternalFailure(FAILED_TO_ADD_QUESTION, exc) from exc

        return Question(
            id=key.key,
            user_id=auth.user_id,
            title=question.title,
            question=question.question,
            slack_thread_id=question.slack_thread_id,
            created_at=key.created_at,
            tags=clean_tag_names(question.tags),
        )

    async def get_question_by_id(self, question_id: int) -> Question:
        question = await self.question_dao.get_question_by_id(question_id).first()
        if question is None:
            raise NotFound()
        return question

    async def get_question_by_slack_thread_id(self, thread_id: str) -> Question:
        question = await self.question_dao.get_question_by_slack_thread_id(thread_id).first()
        if question is None:
            raise NotFound()
        return question

    async def get_latest_question(self, limit: int | None = None) -> list[Question]:
        if limit is None:
            limit = self.default_latest_limit
        try:
            return await self.question_dao.get_latest_questions(limit).to_list()
        except DataAccessFailure as exc:
            logger.error("Failed to get latest %s questions", limit, exc_info=True)
            raise InternalFailure(FAILED_TO_GET_LATEST_QUESTIONS, exc) from exc

    async def get_questions_by_search_query(
        self, search_query: str | None, limit: int | None = None
    ) -> list[Question]:
        """
        Questions whose title or body contains *search_query*.

        A missing or empty query matches nothing and never reaches the
        database.
        """
        if limit is None:
            limit = self.default_search_limit
        if not search_query:
            return []
        try:
            return await self.question_dao.get_questions(search_query, limit).to_list()
        except DataAccessFailure as exc:
            logger.error(
                "Failed to search for questions with search query: [%s]", search_query,
                exc_info=True,
            )
            raise InternalFailure(FAILED_TO_SEARCH_FOR_QUESTIONS, exc) from exc

    async def up_vote_question(self, thread_id: str) -> None:
        await self._vote(self.question_dao.up_vote_question(thread_id), thread_id)

    async def down_vote_question(self, thread_id: str) -> None:
        await self._vote(self.question_dao.down_vote_question(thread_id), thread_id)

    async def _vote(self, operation, thread_id: str) -> None:
        try:
            await operation
        except DataAccessFailure as exc:
            logger.error("Vote on question in thread %s failed", thread_id, exc_info=True)
            raise InternalFailure(FAILED_TO_VOTE, exc) from exc
