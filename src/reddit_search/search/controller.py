"""Per-screen search session state and request orchestration."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

import structlog

from reddit_search.favorites.store import FavoritesStore
from reddit_search.reddit.client import RedditClient
from reddit_search.reddit.errors import RequestError, SearchCancelled
from reddit_search.reddit.schemas import PostResult, SearchPage, SubredditResult
from reddit_search.reddit.sort import RedditSort

logger = structlog.get_logger()

FAILURE_TITLE = "Something went wrong :("

ResultT = TypeVar("ResultT", PostResult, SubredditResult)

Notifier = Callable[[str, str], None]


class SearchState(str, Enum):
    """Lifecycle of a search session."""

    IDLE = "idle"
    SEARCHING = "searching"
    DISPLAYING = "displaying"
    FAILED = "failed"


def log_notifier(title: str, message: str) -> None:
    """Default failure notifier; reports through the log only."""
    logger.error("search_failed", title=title, message=message)


class SearchController(ABC, Generic[ResultT]):
    """Owns query, sort, results and the in-flight request of one screen.

    At most one request is live per controller. Starting a search or
    loading more cancels the previous request first, so only the latest
    call can change the displayed state regardless of the order in which
    responses arrive.

    Attributes:
        query: Current query text.
        sort: Current sort option.
        results: Accumulated results for the current query and sort.
        view_all_url: Browser URL of the current query.
        after: Cursor of the next page, empty when there is none.
        state: Current lifecycle state.
        error: Message of the last failure, None otherwise.
    """

    def __init__(
        self,
        notify: Notifier | None = None,
        on_change: Callable[[SearchController[ResultT]], None] | None = None,
    ) -> None:
        """Initialize an idle session.

        Args:
            notify: Called with (title, message) when a search fails.
            on_change: Called after every state change.
        """
        self.query = ""
        self.sort = RedditSort.RELEVANCE
        self.results: list[ResultT] = []
        self.view_all_url = ""
        self.after = ""
        self.state = SearchState.IDLE
        self.error: str | None = None
        self._notify = notify or log_notifier
        self._on_change = on_change
        self._cancel: asyncio.Event | None = None
        self._closed = False

    @property
    def loading(self) -> bool:
        return self.state is SearchState.SEARCHING

    @property
    def closed(self) -> bool:
        return self._closed

    async def search(self, query: str, sort: RedditSort = RedditSort.RELEVANCE) -> None:
        """Run a fresh search, replacing the current results.

        An empty query cancels any request and returns to idle.

        Args:
            query: New query text.
            sort: Sort option for the new search.
        """
        if self._closed:
            return

        cancel = self._supersede()
        self.query = query
        self.sort = sort
        self.results = []
        self.after = ""
        self.error = None

        if not query:
            self.view_all_url = ""
            self._set_state(SearchState.IDLE)
            return

        self._set_state(SearchState.SEARCHING)
        page = await self._run(cancel, "")
        if page is None:
            return

        self.results = list(page.items)
        self.after = page.after
        self.view_all_url = page.url
        self._set_state(SearchState.DISPLAYING)

    async def change_sort(self, sort: RedditSort) -> None:
        """Re-run the current query with another sort option."""
        await self.search(self.query, sort)

    async def load_more(self) -> None:
        """Fetch the next page and append it to the current results.

        Does nothing without a query or a next-page cursor. The view-all
        URL keeps pointing at the original query.
        """
        if self._closed or not self.query or not self.after:
            return

        cancel = self._supersede()
        self.error = None
        self._set_state(SearchState.SEARCHING)
        page = await self._run(cancel, self.after)
        if page is None:
            return

        self.results = [*self.results, *page.items]
        self.after = page.after
        self._set_state(SearchState.DISPLAYING)

    def close(self) -> None:
        """Tear the session down, cancelling any outstanding request."""
        if self._closed:
            return
        self._closed = True
        if self._cancel is not None:
            self._cancel.set()
        logger.debug("search_session_closed", query=self.query)

    @abstractmethod
    async def _fetch(
        self,
        query: str,
        sort: RedditSort,
        after: str,
        cancel: asyncio.Event,
    ) -> SearchPage:
        """Request one page of results for the given query and sort."""

    async def _run(self, cancel: asyncio.Event, after: str) -> SearchPage | None:
        """Fetch one page; None when the request was superseded or failed."""
        try:
            page = await self._fetch(self.query, self.sort, after, cancel)
        except SearchCancelled:
            return None
        except Exception as e:
            if cancel.is_set():
                return None
            self._fail(e)
            return None

        if cancel.is_set():
            return None
        return page

    def _supersede(self) -> asyncio.Event:
        if self._cancel is not None and not self._cancel.is_set():
            self._cancel.set()
            logger.debug("search_superseded", query=self.query)
        self._cancel = asyncio.Event()
        return self._cancel

    def _fail(self, error: Exception) -> None:
        message = str(error) or type(error).__name__
        logger.warning(
            "search_request_failed",
            query=self.query,
            sort=self.sort.name.lower(),
            error=message,
            exc_info=not isinstance(error, RequestError),
        )
        self.error = message
        self._set_state(SearchState.FAILED)
        self._notify(FAILURE_TITLE, message)

    def _set_state(self, state: SearchState) -> None:
        self.state = state
        if self._on_change is not None:
            self._on_change(self)


class PostSearchController(SearchController[PostResult]):
    """Post search, site-wide or restricted to one subreddit.

    Attributes:
        scope: Empty for site-wide, or a subreddit path (``/r/name/``).
    """

    def __init__(
        self,
        client: RedditClient,
        scope: str = "",
        page_size: int | None = None,
        notify: Notifier | None = None,
        on_change: Callable[[SearchController[PostResult]], None] | None = None,
    ) -> None:
        super().__init__(notify=notify, on_change=on_change)
        self.scope = scope
        self._client = client
        self._page_size = page_size

    async def _fetch(
        self,
        query: str,
        sort: RedditSort,
        after: str,
        cancel: asyncio.Event,
    ) -> SearchPage:
        return await self._client.search_posts(
            self.scope,
            query,
            page_size=self._page_size,
            sort=sort.sort_value,
            page_cursor=after,
            cancel=cancel,
        )


class SubredditSearchController(SearchController[SubredditResult]):
    """Subreddit search with favorite flags taken from the favorites store.

    The remote subreddit search has no sort options, so the sort
    attribute is tracked but not sent.
    """

    def __init__(
        self,
        client: RedditClient,
        favorites: FavoritesStore,
        page_size: int | None = None,
        notify: Notifier | None = None,
        on_change: Callable[[SearchController[SubredditResult]], None] | None = None,
    ) -> None:
        super().__init__(notify=notify, on_change=on_change)
        self.favorites = favorites
        self._client = client
        self._page_size = page_size

    def add_favorite(self, subreddit: str) -> None:
        """Star a subreddit and flag matching displayed results."""
        self.favorites.add(subreddit)
        self._flag(subreddit, True)

    def remove_favorite(self, subreddit: str) -> None:
        """Unstar a subreddit and clear the flag on displayed results."""
        self.favorites.remove(subreddit)
        self._flag(subreddit, False)

    def refresh_favorites(self) -> None:
        """Re-read favorite flags for the displayed results from the store."""
        self.results = self.favorites.annotate(self.results)

    def _flag(self, subreddit: str, is_favorite: bool) -> None:
        self.results = [
            item.model_copy(update={"is_favorite": is_favorite})
            if item.subreddit == subreddit
            else item
            for item in self.results
        ]
        if self._on_change is not None:
            self._on_change(self)

    async def _fetch(
        self,
        query: str,
        sort: RedditSort,
        after: str,
        cancel: asyncio.Event,
    ) -> SearchPage:
        page = await self._client.search_subreddits(
            query,
            cancel=cancel,
            page_size=self._page_size,
            page_cursor=after,
        )
        return page.model_copy(update={"items": self.favorites.annotate(page.items)})
