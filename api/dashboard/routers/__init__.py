from .auth import router as auth_router
from .stats import router as stats_router
from .color import router as color_router
from .channels import router as channels_router
from .discord import router as discord_router
from .maps import router as maps_router
from .changelog import router as changelog_router

__all__ = [
    "auth_router",
    "stats_router",
    "color_router",
    "channels_router",
    "discord_router",
    "maps_router",
    "changelog_router",
]
