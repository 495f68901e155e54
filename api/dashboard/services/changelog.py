"""
Changelog store - in-memory feed of release notes with view counters.

The dashboard renders the feed as a fixed 3 x 40 grid, so the store always
hands out exactly GRID_SLOTS slots, newest entry first, padded with None.
"""

import logging
import threading
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

GRID_ROWS = 3
GRID_COLUMNS = 40
GRID_SLOTS = GRID_ROWS * GRID_COLUMNS


def _seed_entries() -> list[dict[str, Any]]:
    return [
        {
            "date": datetime.now(timezone.utc).isoformat(),
            "views": 0,
            "added": [
                "Added the Changes section with an interactive grid of squares.",
                "Changes are color coded: green for added, orange for fixed, blue for changed.",
                "Added a modal with the full details of each change.",
                "Added view counters for changelog entries.",
            ],
            "fixed": [],
            "changed": [],
        },
        {
            "date": "2025-01-15T10:00:00+00:00",
            "views": 66,
            "added": ["Removed street names from the HUD."],
            "fixed": [
                "Fixed barrier collisions at the Fort Zancudo checkpoint.",
                "Fixed weapon durability.",
                "Fixed the phone camera not taking photos.",
                "Fixed worn body armor losing durability on vehicle collisions.",
            ],
            "changed": [],
        },
        {
            "date": "2025-01-14T08:00:00+00:00",
            "views": 42,
            "added": [],
            "fixed": [
                "Fixed texture loading errors.",
                "Fixed time synchronization.",
            ],
            "changed": [
                "Reworked the trading system.",
                "Updated the inventory interface.",
            ],
        },
        {
            "date": "2025-01-13T15:30:00+00:00",
            "views": 88,
            "added": [
                "Added a new location.",
                "Added new vehicles.",
            ],
            "fixed": [],
            "changed": [],
        },
    ]


class ChangelogStore:
    """Thread-safe list of changelog entries, index 0 is the newest."""

    def __init__(self, entries: Optional[list[dict[str, Any]]] = None):
        self._entries = deepcopy(entries) if entries is not None else _seed_entries()
        self._lock = threading.Lock()

    def slots(self) -> list[Optional[dict[str, Any]]]:
        """All grid slots; empty slots are None."""
        with self._lock:
            entries = deepcopy(self._entries[:GRID_SLOTS])
        return entries + [None] * (GRID_SLOTS - len(entries))

    def record_view(self, index: int) -> int:
        """Increment and return the view counter of one entry.

        Raises:
            KeyError: If the slot is empty
        """
        with self._lock:
            if not 0 <= index < len(self._entries):
                raise KeyError(index)
            entry = self._entries[index]
            entry["views"] = entry.get("views", 0) + 1
            return entry["views"]


_changelog_store: Optional[ChangelogStore] = None


def get_changelog_store() -> ChangelogStore:
    """Get the changelog store, creating the seeded one on first use."""
    global _changelog_store
    if _changelog_store is None:
        _changelog_store = ChangelogStore()
        logger.info("Changelog store initialized")
    return _changelog_store
