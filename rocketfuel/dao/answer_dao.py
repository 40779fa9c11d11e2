"""
Answer data access.

Reads join the author's name in as ``created_by``; ``get_answer_by_id``
additionally carries the parent question so ownership can be checked
before acceptance.
"""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from rocketfuel import models
from rocketfuel.dao.operation import DaoOperation
from rocketfuel.dao.question_dao import to_question
from rocketfuel.schemas import Answer, AnswerCreate, GeneratedKey


def to_answer(row: models.Answer, created_by: str | None = None) -> Answer:
    return Answer(
        id=row.id,
        user_id=row.user_id,
        question_id=row.question_id,
        title=row.title,
        answer=row.answer,
        votes=row.votes,
        accepted=row.accepted,
        slack_thread_id=row.slack_thread_id,
        created_at=row.created_at,
        created_by=created_by,
    )


class AnswerDao:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def _operation(self, description: str, body) -> DaoOperation:
        return DaoOperation(self._session_factory, body, description)

    def _select(self):
        return select(models.Answer, models.User.name).join(
            models.User, models.User.id == models.Answer.user_id
        )

    def _fetch(self, description: str, stmt) -> DaoOperation[list[Answer]]:
        async def body(session: AsyncSession) -> list[Answer]:
            result = await session.execute(stmt)
            return [to_answer(row, name) for row, name in result.all()]

        return self._operation(description, body)

    def _update(self, description: str, stmt) -> DaoOperation[int]:
        async def body(session: AsyncSession) -> int:
            result = await session.execute(stmt)
            return result.rowcount

        return self._operation(description, body)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_answer(
        self, user_id: int, question_id: int, answer: AnswerCreate
    ) -> DaoOperation[GeneratedKey]:
        async def body(session: AsyncSession) -> GeneratedKey:
            row = models.Answer(
                user_id=user_id,
                question_id=question_id,
                title=answer.title,
                answer=answer.answer,
                slack_thread_id=answer.slack_thread_id,
                votes=0,
                accepted=False,
            )
            session.add(row)
            await session.flush()
            return GeneratedKey(key=row.id, created_at=row.created_at)

        return self._operation("create_answer", body)

    def update_answer(
        self, user_id: int, question_id: int, answer_id: int, answer: AnswerCreate
    ) -> DaoOperation[int]:
        """
        Rewrite the title and body of an answer.

        Matches on answer, question and author together, so an update by
        anyone but the author affects zero rows.
        """
        stmt = (
            update(models.Answer)
            .where(
                models.Answer.id == answer_id,
                models.Answer.question_id == question_id,
                models.Answer.user_id == user_id,
            )
            .values(title=answer.title, answer=answer.answer)
        )
        return self._update("update_answer", stmt)

    def mark_as_accepted(self, answer_id: int) -> DaoOperation[int]:
        stmt = (
            update(models.Answer)
            .where(models.Answer.id == answer_id)
            .values(accepted=True)
        )
        return self._update("mark_as_accepted", stmt)

    def up_vote_answer(self, thread_id: str) -> DaoOperation[int]:
        stmt = (
            update(models.Answer)
            .where(models.Answer.slack_thread_id == thread_id)
            .values(votes=models.Answer.votes + 1)
        )
        return self._update("up_vote_answer", stmt)

    def down_vote_answer(self, thread_id: str) -> DaoOperation[int]:
        stmt = (
            update(models.Answer)
            .where(models.Answer.slack_thread_id == thread_id)
            .values(votes=models.Answer.votes - 1)
        )
        return self._update("down_vote_answer", stmt)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_answers(self, question_id: int) -> DaoOperation[list[Answer]]:
        stmt = (
            self._select()
            .where(models.Answer.question_id == question_id)
            .order_by(models.Answer.created_at, models.Answer.id)
        )
        return self._fetch("get_answers", stmt)

    def get_answer(self, slack_id: str) -> DaoOperation[list[Answer]]:
        stmt = self._select().where(models.Answer.slack_thread_id == slack_id)
        return self._fetch("get_answer", stmt)

    def get_answer_by_id(self, answer_id: int) -> DaoOperation[list[Answer]]:
        """The answer with *answer_id*, its ``question`` populated."""
        stmt = (
            self._select()
            .add_columns(models.Question)
            .join(models.Question, models.Question.id == models.Answer.question_id)
            .where(models.Answer.id == answer_id)
            .options(selectinload(models.Question.tags))
        )

        async def body(session: AsyncSession) -> list[Answer]:
            result = await session.execute(stmt)
            answers = []
            for row, name, question in result.all():
                answer = to_answer(row, name)
                answer.question = to_question(question)
                answers.append(answer)
            return answers

        return self._operation("get_answer_by_id", body)
