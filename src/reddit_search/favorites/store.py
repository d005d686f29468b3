"""Favorite subreddits persisted in local storage."""

from __future__ import annotations

import json
from collections.abc import Iterable

import structlog

from reddit_search.favorites.storage import LocalStorage
from reddit_search.reddit.schemas import SubredditResult
from reddit_search.reddit.urls import DEFAULT_BASE_URL, join_with_base_url

logger = structlog.get_logger()

STORAGE_KEY = "favoriteSubreddits"


def subreddit_key(name: str) -> str:
    """Build the favorites key for a bare subreddit name (``python`` -> ``/r/python/``)."""
    name = name.strip("/")
    if name.lower().startswith("r/"):
        name = name[2:]
    return f"/r/{name}/"


def subreddit_title(key: str) -> str:
    """``/r/python/`` -> ``r/python``."""
    return key.strip("/")


def subreddit_name(key: str) -> str:
    """``/r/python/`` -> ``python``."""
    return subreddit_title(key)[2:]


def subreddit_url(key: str, base_url: str = DEFAULT_BASE_URL) -> str:
    return join_with_base_url(key, base_url)


class FavoritesStore:
    """Set of favorite subreddit paths stored as one JSON list.

    Each mutation is a read-modify-write of the whole list. There is no
    internal locking: callers issue mutations one at a time.
    """

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY) -> None:
        """Initialize store.

        Args:
            storage: Key-value storage holding the serialized list.
            key: Storage key of the list.
        """
        self._storage = storage
        self._key = key

    def exists(self, subreddit: str) -> bool:
        """Check whether a subreddit path is a favorite.

        Args:
            subreddit: Subreddit path, e.g. ``/r/python/``.

        Returns:
            True if stored, False otherwise (including an empty store).
        """
        return subreddit in self._read()

    def list(self) -> list[str]:
        """Return all favorites in insertion order."""
        return self._read()

    def add(self, subreddit: str) -> None:
        """Append a favorite; already stored paths are left as they are.

        Args:
            subreddit: Subreddit path to add.
        """
        favorites = self._read()
        if subreddit in favorites:
            return

        favorites.append(subreddit)
        self._write(favorites)
        logger.info("favorite_added", subreddit=subreddit, count=len(favorites))

    def remove(self, subreddit: str) -> None:
        """Remove a favorite; unknown paths are ignored.

        Args:
            subreddit: Subreddit path to remove.
        """
        favorites = self._read()
        if subreddit not in favorites:
            return

        favorites.remove(subreddit)
        self._write(favorites)
        logger.info("favorite_removed", subreddit=subreddit, count=len(favorites))

    def annotate(self, items: Iterable[SubredditResult]) -> list[SubredditResult]:
        """Copy subreddit results with is_favorite set from the current store.

        Args:
            items: Results as returned by the client.

        Returns:
            New result records in the same order.
        """
        favorites = set(self._read())
        return [
            item.model_copy(update={"is_favorite": item.subreddit in favorites})
            for item in items
        ]

    def _read(self) -> list[str]:
        item = self._storage.get_item(self._key)
        if not item:
            return []
        return json.loads(item)

    def _write(self, favorites: list[str]) -> None:
        self._storage.set_item(self._key, json.dumps(favorites))
