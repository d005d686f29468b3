"""Remote search API: URL building, request handling and result mapping."""

from reddit_search.reddit.client import RedditClient
from reddit_search.reddit.errors import RedditSearchError, RequestError, SearchCancelled
from reddit_search.reddit.schemas import PostResult, SearchPage, SearchResult, SubredditResult
from reddit_search.reddit.sort import RedditSort
from reddit_search.reddit.urls import build_api_url, build_browser_url, join_with_base_url

__all__ = [
    "PostResult",
    "RedditClient",
    "RedditSearchError",
    "RedditSort",
    "RequestError",
    "SearchCancelled",
    "SearchPage",
    "SearchResult",
    "SubredditResult",
    "build_api_url",
    "build_browser_url",
    "join_with_base_url",
]
