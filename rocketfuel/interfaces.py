"""Capabilities the core consumes but does not own."""
from abc import ABC, abstractmethod

from rocketfuel.schemas import User


class UserDirectory(ABC):
    """Resolves user records by numeric id."""

    @abstractmethod
    async def get_user_by_id(self, user_id: int) -> User:
        """Return the user or raise ``NotFound``."""


class ChatWorkspace(ABC):
    """The chat workspace used for out-of-band notifications."""

    @abstractmethod
    async def get_user_id(self, email: str) -> str:
        """Return the workspace member id registered for *email*."""

    @abstractmethod
    async def post_message_as_bot_user(self, channel: str, blocks: list[dict]) -> None:
        """Post *blocks* to *channel* (a member id opens a direct message)."""

    async def close(self) -> None:
        """Release held connections; implementations override when they keep any."""
