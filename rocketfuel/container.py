"""
Process-wide wiring.

Everything the request handlers need is built once, here, from a session
factory and the chat workspace.  Tests build their own ``Container`` from
an in-memory database and a fake workspace.
"""
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketfuel.cache import CacheManager
from rocketfuel.config import Settings, settings as default_settings
from rocketfuel.dao.answer_dao import AnswerDao
from rocketfuel.dao.question_dao import QuestionDao
from rocketfuel.dao.tag_dao import TagDao
from rocketfuel.dao.user_dao import UserDao
from rocketfuel.interfaces import ChatWorkspace, UserDirectory
from rocketfuel.notifications import NotificationPublisher
from rocketfuel.services.answer_service import AnswerService
from rocketfuel.services.question_service import QuestionService
from rocketfuel.services.tag_service import TagService
from rocketfuel.services.user_directory import DatabaseUserDirectory
from rocketfuel.slack import SlackWorkspace
from rocketfuel.transactions import TransactionCoordinator


@dataclass
class Container:
    config: Settings
    cache: CacheManager
    chat_workspace: ChatWorkspace
    user_directory: UserDirectory
    notifications: NotificationPublisher
    question_service: QuestionService
    answer_service: AnswerService
    tag_service: TagService

    @classmethod
    def build(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        chat_workspace: ChatWorkspace | None = None,
        config: Settings | None = None,
        cache: CacheManager | None = None,
        user_directory: UserDirectory | None = None,
    ) -> "Container":
        config = config or default_settings
        cache = cache or CacheManager(config.REDIS_URL)
        if chat_workspace is None:
            chat_workspace = SlackWorkspace(config, cache)

        question_dao = QuestionDao(session_factory)
        answer_dao = AnswerDao(session_factory)
        user_directory = user_directory or DatabaseUserDirectory(UserDao(session_factory))

        notifications = NotificationPublisher(
            question_dao,
            user_directory,
            chat_workspace,
            base_url=config.BASE_URL,
            timeout=config.NOTIFICATION_TIMEOUT,
        )
        return cls(
            config=config,
            cache=cache,
            chat_workspace=chat_workspace,
            user_directory=user_directory,
            notifications=notifications,
            question_service=QuestionService(question_dao, config),
            answer_service=AnswerService(
                answer_dao,
                question_dao,
                TransactionCoordinator(session_factory),
                notifications,
            ),
            tag_service=TagService(TagDao(session_factory), config),
        )

    async def start(self) -> None:
        await self.cache.connect()

    async def stop(self) -> None:
        await self.notifications.drain(timeout=self.config.NOTIFICATION_TIMEOUT)
        await self.chat_workspace.close()
        await self.cache.disconnect()
