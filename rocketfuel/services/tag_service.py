"""Tag lookups used by the question form's tag autocomplete."""
import logging

from rocketfuel.config import Settings
from rocketfuel.dao.tag_dao import TagDao
from rocketfuel.errors import FAILED_TO_SEARCH_FOR_TAGS, DataAccessFailure, InternalFailure

logger = logging.getLogger(__name__)


class TagService:

    def __init__(self, tag_dao: TagDao, config: Settings) -> None:
        self.tag_dao = tag_dao
        self.search_limit = config.MAX_LIMIT
        self.popular_limit = config.POPULAR_TAGS_LIMIT

    async def get_tags(self, search_query: str | None) -> list[str]:
        if not search_query:
            return []
        try:
            return await self.tag_dao.get_tags(search_query, self.search_limit).to_list()
        except DataAccessFailure as exc:
            logger.error("Failed to search for tags with search query: [%s]", search_query)
            raise InternalFailure(FAILED_TO_SEARCH_FOR_TAGS, exc) from exc

    async def get_popular_tags(self) -> list[str]:
        try:
            return await self.tag_dao.get_popular_tags(self.popular_limit).to_list()
        except DataAccessFailure as exc:
            logger.error("Failed to get popular tags")
            raise InternalFailure(FAILED_TO_SEARCH_FOR_TAGS, exc) from exc
