"""Locally persisted favorite subreddits."""

from reddit_search.favorites.storage import LocalStorage
from reddit_search.favorites.store import (
    FavoritesStore,
    subreddit_key,
    subreddit_name,
    subreddit_title,
    subreddit_url,
)

__all__ = [
    "FavoritesStore",
    "LocalStorage",
    "subreddit_key",
    "subreddit_name",
    "subreddit_title",
    "subreddit_url",
]
