from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List


class GuildResponse(BaseModel):
    """A guild the bot is in."""
    id: str
    name: str
    icon: Optional[str] = None
    member_count: Optional[int] = None


class ChannelResponse(BaseModel):
    """A text-based guild channel."""
    id: str
    name: Optional[str] = None
    type: int


class AttachmentResponse(BaseModel):
    url: str
    name: str


class DiscordMessageResponse(BaseModel):
    """A channel message as shown in the message reader."""
    id: str
    content: str = ""
    author: str
    author_id: str
    timestamp: datetime
    attachments: List[AttachmentResponse] = []


class SendMessageRequest(BaseModel):
    """Message to post as the bot; needs content, an embed, or both."""
    channel_id: str
    content: Optional[str] = None
    embed: Optional[dict] = None


class SendMessageResponse(BaseModel):
    success: bool
    message_id: str
    channel_id: str
