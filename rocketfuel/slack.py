"""
Slack Web API client implementing the ``ChatWorkspace`` capability.

Only the two calls the notification pipeline needs are wrapped:
``users.lookupByEmail`` and ``chat.postMessage``.  Member ids are cached
per e-mail address through the shared ``CacheManager``.
"""
import logging

import httpx

from rocketfuel.cache import CacheManager
from rocketfuel.config import Settings
from rocketfuel.interfaces import ChatWorkspace

logger = logging.getLogger(__name__)


class SlackError(Exception):
    """Slack answered with ``ok: false`` or an unusable payload."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"{method}: {error}")
        self.method = method
        self.error = error


class SlackWorkspace(ChatWorkspace):

    def __init__(
        self,
        config: Settings,
        cache: CacheManager,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._cache = cache
        self._cache_ttl = config.CACHE_TTL_SLACK_USER
        self._client = client or httpx.AsyncClient(
            base_url=config.SLACK_API_URL,
            headers={"Authorization": f"Bearer {config.SLACK_BOT_TOKEN}"},
            timeout=config.SLACK_TIMEOUT,
        )

    async def close(self) -> None:
        await self._client.aclose()

    def _check(self, method: str, response: httpx.Response) -> dict:
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise SlackError(method, payload.get("error", "unknown_error"))
        return payload

    async def get_user_id(self, email: str) -> str:
        key = CacheManager.slack_user_key(email)
        cached = await self._cache.get(key)
        if cached:
            return cached

        response = await self._client.get("/users.lookupByEmail", params={"email": email})
        payload = self._check("users.lookupByEmail", response)
        user_id = payload.get("user", {}).get("id")
        if not user_id:
            raise SlackError("users.lookupByEmail", "missing_user_id")

        await self._cache.set(key, user_id, ttl=self._cache_ttl)
        return user_id

    async def post_message_as_bot_user(self, channel: str, blocks: list[dict]) -> None:
        # Plain-text fallback for clients that cannot render blocks.
        fallback = "\n".join(
            b["text"]["text"] for b in blocks if b.get("type") == "section" and "text" in b
        )
        response = await self._client.post(
            "/chat.postMessage",
            json={"channel": channel, "blocks": blocks, "text": fallback},
        )
        self._check("chat.postMessage", response)
        logger.debug("Posted message to %s", channel)
