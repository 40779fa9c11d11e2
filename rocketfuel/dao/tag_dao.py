from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketfuel import models
from rocketfuel.dao.operation import DaoOperation


class TagDao:

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def _names(self, description: str, stmt) -> DaoOperation[list[str]]:
        async def body(session: AsyncSession) -> list[str]:
            result = await session.execute(stmt)
            return list(result.scalars().all())

        return DaoOperation(self._session_factory, body, description)

    def get_tags(self, search_query: str, limit: int) -> DaoOperation[list[str]]:
        stmt = (
            select(models.Tag.name)
            .where(models.Tag.name.contains(search_query.lower(), autoescape=True))
            .order_by(models.Tag.name)
            .limit(limit)
        )
        return self._names("get_tags", stmt)

    def get_popular_tags(self, limit: int) -> DaoOperation[list[str]]:
        """Tag names ordered by how many questions carry them."""
        usage = func.count(models.question_tag.c.question_id)
        stmt = (
            select(models.Tag.name)
            .join(models.question_tag, models.question_tag.c.tag_id == models.Tag.id)
            .group_by(models.Tag.id, models.Tag.name)
            .order_by(desc(usage), models.Tag.name)
            .limit(limit)
        )
        return self._names("get_popular_tags", stmt)
