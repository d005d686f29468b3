"""Async client for the remote JSON search API."""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import ValidationError

from reddit_search.reddit.errors import RequestError, SearchCancelled
from reddit_search.reddit.schemas import (
    Listing,
    PostResult,
    RawPost,
    RawSubreddit,
    SearchPage,
    SubredditResult,
    format_created,
    preview_image_url,
)
from reddit_search.reddit.urls import (
    DEFAULT_BASE_URL,
    SUBREDDIT_RESULT_TYPE,
    build_api_url,
    build_browser_url,
    join_with_base_url,
)

if TYPE_CHECKING:
    from reddit_search.config import Settings

logger = structlog.get_logger()


class RedditClient:
    """Issues search requests and normalizes the returned listings.

    Cancellation is cooperative: callers pass an ``asyncio.Event`` and
    set it to abort the request. An aborted request raises
    SearchCancelled, never RequestError.

    Attributes:
        base_url: Service base URL used for every built URL.
        result_limit: Page size used when a call does not specify one.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        result_limit: int = 10,
    ) -> None:
        """Initialize client.

        Args:
            http: Shared HTTP client. Closed by aclose().
            base_url: Service base URL.
            result_limit: Default page size.
        """
        self._http = http
        self.base_url = base_url
        self.result_limit = result_limit

    @classmethod
    def from_settings(cls, settings: Settings) -> RedditClient:
        """Create a client with its own HTTP connection pool.

        Args:
            settings: Application settings.

        Returns:
            Configured client.
        """
        http = httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        )
        return cls(
            http,
            base_url=settings.reddit_base_url,
            result_limit=settings.result_limit,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def search_posts(
        self,
        scope: str,
        query: str,
        page_size: int | None = None,
        sort: str = "",
        page_cursor: str = "",
        cancel: asyncio.Event | None = None,
    ) -> SearchPage:
        """Search posts site-wide or within one subreddit.

        Args:
            scope: Empty for site-wide, or a subreddit path (``/r/name/``).
            query: Literal query text.
            page_size: Results per page, defaults to result_limit.
            sort: Remote sort value, empty for relevance.
            page_cursor: ``after`` token of the previous page.
            cancel: Event that aborts the request when set.

        Returns:
            Page of PostResult items, next cursor and browser URL.

        Raises:
            RequestError: Non-success status or transport failure.
            SearchCancelled: The cancel event was set first.
        """
        url = build_api_url(
            scope,
            query,
            sort=sort,
            page_size=page_size or self.result_limit,
            page_cursor=page_cursor,
            base_url=self.base_url,
        )
        listing = await self._fetch(url, cancel)

        items = []
        for data in listing.items:
            post = self._map_post(data)
            if post is not None:
                items.append(post)

        return SearchPage(
            items=items,
            after=listing.after,
            url=build_browser_url(scope, query, sort=sort, base_url=self.base_url),
        )

    async def search_subreddits(
        self,
        query: str,
        cancel: asyncio.Event | None = None,
        page_size: int | None = None,
        page_cursor: str = "",
    ) -> SearchPage:
        """Search subreddits by name and description.

        Favorite flags are left unset; see FavoritesStore.annotate().

        Args:
            query: Literal query text.
            cancel: Event that aborts the request when set.
            page_size: Results per page, defaults to result_limit.
            page_cursor: ``after`` token of the previous page.

        Returns:
            Page of SubredditResult items, next cursor and browser URL.

        Raises:
            RequestError: Non-success status or transport failure.
            SearchCancelled: The cancel event was set first.
        """
        url = build_api_url(
            "",
            query,
            result_type=SUBREDDIT_RESULT_TYPE,
            page_size=page_size or self.result_limit,
            page_cursor=page_cursor,
            base_url=self.base_url,
        )
        listing = await self._fetch(url, cancel)

        items = []
        for data in listing.items:
            subreddit = self._map_subreddit(data)
            if subreddit is not None:
                items.append(subreddit)

        return SearchPage(
            items=items,
            after=listing.after,
            url=build_browser_url(
                "", query, result_type=SUBREDDIT_RESULT_TYPE, base_url=self.base_url
            ),
        )

    async def _fetch(self, url: str, cancel: asyncio.Event | None) -> Listing:
        """Run the GET, racing it against the cancel event."""
        if cancel is None:
            return await self._get(url)
        if cancel.is_set():
            raise SearchCancelled(url)

        request = asyncio.ensure_future(self._get(url))
        aborted = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait(
                {request, aborted},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            aborted.cancel()
            if not request.done():
                request.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await request

        if cancel.is_set():
            logger.debug("reddit_request_cancelled", url=url)
            raise SearchCancelled(url)
        return request.result()

    async def _get(self, url: str) -> Listing:
        logger.debug("reddit_request", url=url)
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as e:
            logger.warning("reddit_request_failed", url=url, error=str(e))
            raise RequestError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(
                "reddit_request_failed",
                url=url,
                status=response.status_code,
            )
            raise RequestError(
                response.reason_phrase or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RequestError(
                "Invalid JSON response", status_code=response.status_code
            ) from e

        return Listing.parse(payload)

    def _map_post(self, data: dict[str, Any]) -> PostResult | None:
        try:
            raw = RawPost.model_validate(data)
        except ValidationError as e:
            logger.warning("reddit_item_skipped", kind="post", error=str(e))
            return None

        return PostResult(
            id=raw.id,
            title=raw.title,
            url=join_with_base_url(raw.permalink, self.base_url),
            description=raw.selftext,
            image_url=preview_image_url(raw.is_video, raw.url_overridden_by_dest),
            created=format_created(raw.created_utc),
            thumbnail=raw.thumbnail,
            subreddit=raw.subreddit,
        )

    def _map_subreddit(self, data: dict[str, Any]) -> SubredditResult | None:
        try:
            raw = RawSubreddit.model_validate(data)
        except ValidationError as e:
            logger.warning("reddit_item_skipped", kind="subreddit", error=str(e))
            return None

        return SubredditResult(
            id=raw.id,
            title=raw.title,
            url=join_with_base_url(raw.url, self.base_url),
            subreddit=raw.url,
            created=format_created(raw.created_utc),
            subreddit_name=raw.display_name_prefixed[2:],
        )
