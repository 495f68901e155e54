from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
import logging

from ..auth import get_current_session
from ..schemas.discord import (
    GuildResponse,
    ChannelResponse,
    AttachmentResponse,
    DiscordMessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from ..services.discord import DiscordService, DiscordAPIError, get_discord_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["discord"])


def require_discord() -> DiscordService:
    """Dependency returning the Discord service, 503 when no bot is configured."""
    service = get_discord_service()
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Discord bot not available"
        )
    return service


def upstream_error(e: DiscordAPIError, not_found: str) -> HTTPException:
    """Translate a Discord error into the response the dashboard expects."""
    if e.status_code in (403, 404):
        return HTTPException(status_code=404, detail=not_found)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)


@router.get("/guilds", response_model=List[GuildResponse])
async def list_guilds(
    discord: DiscordService = Depends(require_discord),
    session: Optional[str] = Depends(get_current_session),
):
    """Guilds the bot is a member of."""
    try:
        guilds = await discord.list_guilds()
    except DiscordAPIError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)

    return [
        GuildResponse(
            id=guild["id"],
            name=guild.get("name", ""),
            icon=DiscordService.guild_icon_url(guild),
            member_count=guild.get("approximate_member_count"),
        )
        for guild in guilds
    ]


@router.get("/guilds/{guild_id}/channels", response_model=List[ChannelResponse])
async def list_guild_channels(
    guild_id: str,
    discord: DiscordService = Depends(require_discord),
    session: Optional[str] = Depends(get_current_session),
):
    """Text-based channels of a guild."""
    try:
        channels = await discord.list_channels(guild_id)
    except DiscordAPIError as e:
        raise upstream_error(e, "Guild not found")

    return [
        ChannelResponse(id=ch["id"], name=ch.get("name"), type=ch["type"])
        for ch in channels
        if DiscordService.is_text_based(ch)
    ]


@router.get("/channels/{channel_id}/messages", response_model=List[DiscordMessageResponse])
async def read_messages(
    channel_id: str,
    discord: DiscordService = Depends(require_discord),
    session: Optional[str] = Depends(get_current_session),
):
    """Last messages of a channel, oldest first."""
    try:
        channel = await discord.get_channel(channel_id)
        if not DiscordService.is_text_based(channel):
            raise HTTPException(status_code=404, detail="Channel not found or not text-based")
        messages = await discord.list_messages(channel_id)
    except DiscordAPIError as e:
        raise upstream_error(e, "Channel not found or not text-based")

    result = []
    for msg in reversed(messages):
        author = msg.get("author") or {}
        result.append(DiscordMessageResponse(
            id=msg["id"],
            content=msg.get("content") or "",
            author=DiscordService.user_tag(author),
            author_id=author.get("id", ""),
            timestamp=msg["timestamp"],
            attachments=[
                AttachmentResponse(url=att["url"], name=att.get("filename", ""))
                for att in msg.get("attachments", [])
            ]
        ))

    return result


@router.post("/send-message", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest,
    discord: DiscordService = Depends(require_discord),
    session: Optional[str] = Depends(get_current_session),
):
    """Post a message as the bot."""
    if not request.content and not request.embed:
        raise HTTPException(status_code=400, detail="channel_id and content/embed are required")

    try:
        channel = await discord.get_channel(request.channel_id)
        if not DiscordService.is_text_based(channel):
            raise HTTPException(status_code=404, detail="Channel not found or not text-based")
        message = await discord.send_message(
            request.channel_id,
            content=request.content,
            embed=request.embed,
        )
    except DiscordAPIError as e:
        raise upstream_error(e, "Channel not found or not text-based")

    return SendMessageResponse(
        success=True,
        message_id=message["id"],
        channel_id=message.get("channel_id", request.channel_id),
    )
