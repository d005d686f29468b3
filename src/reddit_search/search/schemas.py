"""Pydantic schemas for search session API requests and responses."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from reddit_search.reddit.schemas import SearchResult
from reddit_search.search.controller import SearchState


class SessionKind(str, Enum):
    """Result kind a session searches for."""

    POSTS = "posts"
    SUBREDDITS = "subreddits"


class SessionCreateRequest(BaseModel):
    """Request to open a search session.

    Attributes:
        kind: Search posts or subreddits.
        subreddit: Subreddit name restricting a post search, if any.
    """

    kind: SessionKind = SessionKind.POSTS
    subreddit: str | None = Field(default=None, max_length=100)


class QueryRequest(BaseModel):
    """New query text; an empty query resets the session to idle."""

    query: str = Field(default="", max_length=512)
    sort: str | None = None


class SortRequest(BaseModel):
    sort: str


class SortOption(BaseModel):
    """Sort option as shown to the user.

    Attributes:
        name: Option identifier (``relevance``, ``hot``, ...).
        display_name: Human-readable label.
        value: Literal value sent to the remote API.
    """

    name: str
    display_name: str
    value: str


class SessionSnapshot(BaseModel):
    """Everything a presentation layer needs to render one session.

    Attributes:
        id: Session identifier.
        kind: Result kind of the session.
        scope: Subreddit path restricting the search, empty for site-wide.
        state: Lifecycle state.
        loading: True while a request is outstanding.
        query: Current query text.
        sort: Current sort option.
        results: Accumulated results in display order.
        view_all_url: Browser URL of the current query.
        after: Next-page cursor, empty when there are no more pages.
        error: Message of the last failure.
        created_at: When the session was opened (UTC).
    """

    id: str
    kind: SessionKind
    scope: str = ""
    state: SearchState
    loading: bool
    query: str
    sort: SortOption
    results: list[SearchResult]
    view_all_url: str
    after: str
    error: str | None = None
    created_at: datetime
