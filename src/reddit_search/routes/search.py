"""One-shot search endpoints over the remote API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Query, Request, status

from reddit_search.favorites.store import subreddit_key
from reddit_search.reddit.errors import RequestError
from reddit_search.reddit.schemas import SearchPage
from reddit_search.reddit.sort import RedditSort

if TYPE_CHECKING:
    from reddit_search.favorites.store import FavoritesStore
    from reddit_search.reddit.client import RedditClient

router = APIRouter(prefix="/search", tags=["search"])


def _parse_sort(value: str | None) -> RedditSort:
    try:
        return RedditSort.parse(value)
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e),
        ) from e


@router.get(
    "/posts",
    response_model=SearchPage,
    summary="Search posts",
    description="Searches posts site-wide or within one subreddit.",
)
async def search_posts(
    request: Request,
    q: str = Query(..., min_length=1, max_length=512, description="Search query"),
    sort: str | None = Query(default=None, description="Sort option"),
    subreddit: str | None = Query(
        default=None,
        max_length=100,
        description="Restrict the search to this subreddit",
    ),
    after: str = Query(default="", description="Cursor of the next page"),
    limit: int | None = Query(default=None, ge=1, le=100, description="Results per page"),
) -> SearchPage:
    """Search posts.

    Args:
        request: FastAPI request (provides access to app state).
        q: Query text.
        sort: Sort option name or remote value, relevance when omitted.
        subreddit: Subreddit name to restrict the search to.
        after: Pagination cursor from a previous page.
        limit: Page size, configured default when omitted.

    Returns:
        One page of post results.

    Raises:
        HTTPException: 422 for unknown sort, 502 when the remote API fails.
    """
    client: RedditClient = request.app.state.reddit_client
    scope = subreddit_key(subreddit) if subreddit else ""

    try:
        return await client.search_posts(
            scope,
            q,
            page_size=limit,
            sort=_parse_sort(sort).sort_value,
            page_cursor=after,
        )
    except RequestError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e


@router.get(
    "/subreddits",
    response_model=SearchPage,
    summary="Search subreddits",
    description="Searches subreddits and flags the ones marked as favorite.",
)
async def search_subreddits(
    request: Request,
    q: str = Query(..., min_length=1, max_length=512, description="Search query"),
    after: str = Query(default="", description="Cursor of the next page"),
) -> SearchPage:
    """Search subreddits.

    Raises:
        HTTPException: 502 when the remote API fails.
    """
    client: RedditClient = request.app.state.reddit_client
    favorites: FavoritesStore = request.app.state.favorites

    try:
        page = await client.search_subreddits(q, page_cursor=after)
    except RequestError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e

    return page.model_copy(update={"items": favorites.annotate(page.items)})
