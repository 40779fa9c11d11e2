"""
Question data access.

Every method returns a pending ``DaoOperation``; the statement runs only
when the caller consumes the operation or hands it to the
``TransactionCoordinator``.
"""
from sqlalchemy import desc, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from rocketfuel import models
from rocketfuel.dao.operation import DaoOperation
from rocketfuel.schemas import GeneratedKey, Question, QuestionCreate


def to_question(row: models.Question) -> Question:
    return Question(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        question=row.question,
        votes=row.votes,
        answered=row.answered,
        slack_thread_id=row.slack_thread_id,
        created_at=row.created_at,
        tags=[t.name for t in row.tags],
    )


def clean_tag_names(names: list[str]) -> list[str]:
    """Strip, lowercase and de-duplicate *names*, keeping their order."""
    seen: dict[str, None] = {}
    for name in names:
        name = name.strip().lower()
        if name:
            seen.setdefault(name, None)
    return list(seen)


async def _resolve_tags(session: AsyncSession, names: list[str]) -> list[models.Tag]:
    """
    Return Tag rows for each name in *names*, creating any that do not yet
    exist.  Inserts are flushed within the caller's transaction.
    """
    tags: list[models.Tag] = []
    for name in names:
        result = await session.execute(select(models.Tag).where(models.Tag.name == name))
        tag = result.scalar_one_or_none()
        if tag is None:
            tag = models.Tag(name=name)
            session.add(tag)
            await session.flush()
        tags.append(tag)
    return tags


class QuestionDao:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def _operation(self, description: str, body) -> DaoOperation:
        return DaoOperation(self._session_factory, body, description)

    def _select(self):
        return select(models.Question).options(selectinload(models.Question.tags))

    def _fetch(self, description: str, stmt) -> DaoOperation[list[Question]]:
        async def body(session: AsyncSession) -> list[Question]:
            result = await session.execute(stmt)
            return [to_question(row) for row in result.scalars().all()]

        return self._operation(description, body)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_question(self, user_id: int, question: QuestionCreate) -> DaoOperation[GeneratedKey]:
        """Insert *question* for *user_id*; tags are linked in the same transaction."""

        async def body(session: AsyncSession) -> GeneratedKey:
            row = models.Question(
                user_id=user_id,
                title=question.title,
                question=question.question,
                slack_thread_id=question.slack_thread_id,
                votes=0,
                answered=False,
            )
            session.add(row)
            await session.flush()
            key = row.id
            created_at = row.created_at
            names = clean_tag_names(question.tags)
            if names:
                tags = await _resolve_tags(session, names)
                await session.execute(
                    insert(models.question_tag),
                    [{"question_id": key, "tag_id": tag.id} for tag in tags],
                )
            return GeneratedKey(key=key, created_at=created_at)

        return self._operation("add_question", body)

    def mark_as_answered(self, user_id: int, question_id: int) -> DaoOperation[int]:
        stmt = (
            update(models.Question)
            .where(models.Question.id == question_id, models.Question.user_id == user_id)
            .values(answered=True)
        )
        return self._update("mark_as_answered", stmt)

    def up_vote_question(self, thread_id: str) -> DaoOperation[int]:
        stmt = (
            update(models.Question)
            .where(models.Question.slack_thread_id == thread_id)
            .values(votes=models.Question.votes + 1)
        )
        return self._update("up_vote_question", stmt)

    def down_vote_question(self, thread_id: str) -> DaoOperation[int]:
        # Question votes never drop below zero.
        stmt = (
            update(models.Question)
            .where(models.Question.slack_thread_id == thread_id, models.Question.votes > 0)
            .values(votes=models.Question.votes - 1)
        )
        return self._update("down_vote_question", stmt)

    def _update(self, description: str, stmt) -> DaoOperation[int]:
        async def body(session: AsyncSession) -> int:
            result = await session.execute(stmt)
            return result.rowcount

        return self._operation(description, body)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_question_by_id(self, question_id: int) -> DaoOperation[list[Question]]:
        stmt = self._select().where(models.Question.id == question_id)
        return self._fetch("get_question_by_id", stmt)

    def get_question_by_slack_thread_id(self, thread_id: str) -> DaoOperation[list[Question]]:
        stmt = self._select().where(models.Question.slack_thread_id == thread_id)
        return self._fetch("get_question_by_slack_thread_id", stmt)

    def get_latest_questions(self, limit: int) -> DaoOperation[list[Question]]:
        stmt = (
            self._select()
            .order_by(desc(models.Question.created_at), desc(models.Question.id))
            .limit(limit)
        )
        return self._fetch("get_latest_questions", stmt)

    def get_questions(self, search_query: str, limit: int) -> DaoOperation[list[Question]]:
        """Questions whose title or body contains *search_query*, newest first."""
        stmt = (
            self._select()
            .where(
                or_(
                    models.Question.title.contains(search_query, autoescape=True),
                    models.Question.question.contains(search_query, autoescape=True),
                )
            )
            .order_by(desc(models.Question.created_at), desc(models.Question.id))
            .limit(limit)
        )
        return self._fetch("get_questions", stmt)
