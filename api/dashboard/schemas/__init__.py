from .auth import LoginRequest, AuthStatus
from .stats import StatsResponse, TimelineBucket
from .color import PixelColorResponse
from .channels import AutoDeleteChannelResponse
from .discord import (
    GuildResponse,
    ChannelResponse,
    AttachmentResponse,
    DiscordMessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from .maps import MapFile, MapUploadResponse
from .changelog import ChangelogEntry, ChangelogViewResponse

__all__ = [
    "LoginRequest",
    "AuthStatus",
    "StatsResponse",
    "TimelineBucket",
    "PixelColorResponse",
    "AutoDeleteChannelResponse",
    "GuildResponse",
    "ChannelResponse",
    "AttachmentResponse",
    "DiscordMessageResponse",
    "SendMessageRequest",
    "SendMessageResponse",
    "MapFile",
    "MapUploadResponse",
    "ChangelogEntry",
    "ChangelogViewResponse",
]
