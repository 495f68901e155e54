from .discord import DiscordService, DiscordAPIError, get_discord_service, init_discord_service
from .storage import StorageService, StorageError, get_storage_service, init_storage_service
from .changelog import ChangelogStore, get_changelog_store

__all__ = [
    "DiscordService",
    "DiscordAPIError",
    "get_discord_service",
    "init_discord_service",
    "StorageService",
    "StorageError",
    "get_storage_service",
    "init_storage_service",
    "ChangelogStore",
    "get_changelog_store",
]
