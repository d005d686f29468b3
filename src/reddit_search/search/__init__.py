"""Search sessions: per-screen controllers and their registry."""

from reddit_search.search.controller import (
    FAILURE_TITLE,
    PostSearchController,
    SearchController,
    SearchState,
    SubredditSearchController,
)
from reddit_search.search.schemas import SessionKind, SessionSnapshot
from reddit_search.search.sessions import SearchSession, SessionRegistry

__all__ = [
    "FAILURE_TITLE",
    "PostSearchController",
    "SearchController",
    "SearchSession",
    "SearchState",
    "SessionKind",
    "SessionRegistry",
    "SessionSnapshot",
    "SubredditSearchController",
]
