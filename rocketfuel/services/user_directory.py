"""
User directory backed by the shared ``user`` table.

The directory service owns user records; this implementation only reads
them, which is all the notification pipeline needs.
"""
from rocketfuel.dao.user_dao import UserDao
from rocketfuel.errors import NotFound
from rocketfuel.interfaces import UserDirectory
from rocketfuel.schemas import User


class DatabaseUserDirectory(UserDirectory):

    def __init__(self, user_dao: UserDao) -> None:
        self.user_dao = user_dao

    async def get_user_by_id(self, user_id: int) -> User:
        user = await self.user_dao.get_user_by_id(user_id).first()
        if user is None:
            raise NotFound()
        return user
