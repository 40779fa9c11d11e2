from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketfuel import models
from rocketfuel.dao.operation import DaoOperation
from rocketfuel.schemas import User


class UserDao:
    """Read-only view of the user table maintained by the user directory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def get_user_by_id(self, user_id: int) -> DaoOperation[list[User]]:
        async def body(session: AsyncSession) -> list[User]:
            result = await session.execute(select(models.User).where(models.User.id == user_id))
            return [User.model_validate(row) for row in result.scalars().all()]

        return DaoOperation(self._session_factory, body, "get_user_by_id")
