"""Favorite subreddit endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Request
from pydantic import BaseModel

from reddit_search.favorites.store import (
    FavoritesStore,
    subreddit_key,
    subreddit_name,
    subreddit_title,
    subreddit_url,
)

router = APIRouter(prefix="/favorites", tags=["favorites"])

SubredditName = Annotated[
    str, Path(min_length=1, max_length=100, pattern=r"^[A-Za-z0-9_]+$")
]


class FavoriteItem(BaseModel):
    """Favorite subreddit with display fields.

    Attributes:
        subreddit: Stored path, e.g. ``/r/python/``.
        title: ``r/python``.
        name: ``python``.
        url: Subreddit page URL.
    """

    subreddit: str
    title: str
    name: str
    url: str


class FavoriteStatus(BaseModel):
    subreddit: str
    exists: bool


def _store(request: Request) -> FavoritesStore:
    return request.app.state.favorites


def _item(request: Request, key: str) -> FavoriteItem:
    return FavoriteItem(
        subreddit=key,
        title=subreddit_title(key),
        name=subreddit_name(key),
        url=subreddit_url(key, request.app.state.settings.reddit_base_url),
    )


@router.get("", response_model=list[FavoriteItem])
async def list_favorites(request: Request) -> list[FavoriteItem]:
    """List favorites in the order they were added."""
    return [_item(request, key) for key in _store(request).list()]


@router.get("/{name}", response_model=FavoriteStatus)
async def favorite_exists(request: Request, name: SubredditName) -> FavoriteStatus:
    """Check whether a subreddit is a favorite."""
    key = subreddit_key(name)
    return FavoriteStatus(subreddit=key, exists=_store(request).exists(key))


@router.put("/{name}", response_model=FavoriteStatus)
async def add_favorite(request: Request, name: SubredditName) -> FavoriteStatus:
    """Add a favorite. Adding an existing favorite is a no-op."""
    key = subreddit_key(name)
    _store(request).add(key)
    return FavoriteStatus(subreddit=key, exists=True)


@router.delete("/{name}", response_model=FavoriteStatus)
async def remove_favorite(request: Request, name: SubredditName) -> FavoriteStatus:
    """Remove a favorite. Removing an unknown subreddit is a no-op."""
    key = subreddit_key(name)
    _store(request).remove(key)
    return FavoriteStatus(subreddit=key, exists=False)
