"""
Discord Service - thin client over the Discord REST API.

Lists the guilds the bot is in, their text channels and recent messages,
and posts messages as the bot. Responses are returned as the raw Discord
JSON; routers reshape them for the dashboard.
"""

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class DiscordAPIError(Exception):
    """Raised when Discord answers with an error or cannot be reached."""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"Discord API error {status_code}: {message}")


class DiscordService:
    """Bot-token client for the handful of Discord endpoints the dashboard uses."""

    API_URL = "https://discord.com/api/v10"
    CDN_URL = "https://cdn.discordapp.com"
    MESSAGE_FETCH_LIMIT = 50

    # Guild text, voice, announcement, threads and stage channels carry messages
    TEXT_CHANNEL_TYPES = frozenset({0, 2, 5, 10, 11, 12, 13})

    def __init__(
        self,
        token: str,
        api_url: str = API_URL,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Discord service.

        Args:
            token: Bot token
            api_url: REST API base URL
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bot {token}",
            "User-Agent": "ServerAnalyticsDashboard (https://discord.com, 1.0)",
        }
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers=self._headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Discord request {method} {path} failed: {e}")
            raise DiscordAPIError(502, f"Discord request failed: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.warning(f"Discord {method} {path} returned {response.status_code}: {message}")
            raise DiscordAPIError(response.status_code, message)

        return response.json()

    @classmethod
    def is_text_based(cls, channel: dict) -> bool:
        return channel.get("type") in cls.TEXT_CHANNEL_TYPES

    @classmethod
    def guild_icon_url(cls, guild: dict) -> Optional[str]:
        icon = guild.get("icon")
        if not icon:
            return None
        ext = "gif" if icon.startswith("a_") else "png"
        return f"{cls.CDN_URL}/icons/{guild['id']}/{icon}.{ext}"

    @staticmethod
    def user_tag(user: dict) -> str:
        """`name#1234`, or just the username for accounts without a discriminator."""
        username = user.get("username", "")
        discriminator = user.get("discriminator")
        if discriminator and discriminator != "0":
            return f"{username}#{discriminator}"
        return username

    async def list_guilds(self) -> list[dict]:
        """Guilds the bot is a member of, with approximate member counts."""
        return await self._request("GET", "/users/@me/guilds", params={"with_counts": "true"})

    async def list_channels(self, guild_id: str) -> list[dict]:
        """All channels of a guild (filter with is_text_based)."""
        return await self._request("GET", f"/guilds/{guild_id}/channels")

    async def get_channel(self, channel_id: str) -> dict:
        return await self._request("GET", f"/channels/{channel_id}")

    async def list_messages(self, channel_id: str, limit: int = MESSAGE_FETCH_LIMIT) -> list[dict]:
        """Most recent messages, newest first (Discord's order)."""
        return await self._request(
            "GET",
            f"/channels/{channel_id}/messages",
            params={"limit": limit},
        )

    async def send_message(
        self,
        channel_id: str,
        content: Optional[str] = None,
        embed: Optional[dict] = None,
    ) -> dict:
        """Post a message as the bot."""
        payload: dict[str, Any] = {}
        if content:
            payload["content"] = content
        if embed:
            payload["embeds"] = [embed]

        message = await self._request("POST", f"/channels/{channel_id}/messages", json=payload)
        logger.info(f"Sent message {message.get('id')} to channel {channel_id}")
        return message


# Singleton instance
_discord_service: Optional[DiscordService] = None


def get_discord_service() -> Optional[DiscordService]:
    """Get the Discord service singleton (None when no bot token is configured)."""
    return _discord_service


def init_discord_service(token: str, api_url: str = DiscordService.API_URL, timeout: float = 15.0):
    """Initialize the Discord service singleton."""
    global _discord_service
    _discord_service = DiscordService(token, api_url=api_url, timeout=timeout)
    logger.info("Discord service initialized")
