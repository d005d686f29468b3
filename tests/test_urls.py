"""Search URL builder tests."""

from urllib.parse import parse_qs, urlsplit

import pytest

from reddit_search.reddit.urls import build_api_url, build_browser_url, join_with_base_url


@pytest.mark.parametrize(
    "query",
    ["cats", "funny cats & dogs", "100% #1?", "c++ / rust", "ünïcödé"],
)
def test_api_url_is_absolute_with_query(query: str) -> None:
    """API URL is absolute and round-trips the query through q."""
    parts = urlsplit(build_api_url("", query))
    assert parts.scheme == "https"
    assert parts.netloc == "www.reddit.com"
    assert parts.path == "/search.json"
    assert parse_qs(parts.query)["q"] == [query]


def test_api_url_includes_limit_and_omits_defaults() -> None:
    """Page size is always sent; sort, type and cursor only when set."""
    params = parse_qs(urlsplit(build_api_url("", "cats", page_size=25)).query)
    assert params == {"q": ["cats"], "limit": ["25"]}


def test_api_url_with_sort_type_and_cursor() -> None:
    """Subreddit type, sort and the after cursor become parameters."""
    url = build_api_url("", "cats", result_type="sr", sort="top", page_size=5, page_cursor="t3_abc")
    params = parse_qs(urlsplit(url).query)
    assert params["type"] == ["sr"]
    assert params["sort"] == ["top"]
    assert params["limit"] == ["5"]
    assert params["after"] == ["t3_abc"]


def test_relevance_sort_is_omitted() -> None:
    """Relevance is the remote default and is never sent."""
    assert "sort" not in build_api_url("", "cats", sort="relevance")
    assert "sort" not in build_browser_url("", "cats", sort="relevance")


def test_scoped_search_restricts_to_subreddit() -> None:
    """A subreddit scope changes the path and restricts the search."""
    parts = urlsplit(build_api_url("/r/python/", "asyncio"))
    assert parts.path == "/r/python/search.json"
    assert parse_qs(parts.query)["restrict_sr"] == ["1"]


def test_browser_url_has_no_paging_parameters() -> None:
    """The browser page paginates itself."""
    url = build_browser_url("/r/python/", "asyncio", sort="new")
    parts = urlsplit(url)
    params = parse_qs(parts.query)
    assert parts.path == "/r/python/search"
    assert params == {"q": ["asyncio"], "restrict_sr": ["1"], "sort": ["new"]}


def test_browser_url_for_subreddit_search() -> None:
    url = build_browser_url("", "cats", result_type="sr")
    assert url == "https://www.reddit.com/search?q=cats&type=sr"


def test_custom_base_url() -> None:
    url = build_api_url("", "cats", base_url="https://old.reddit.com/")
    assert url.startswith("https://old.reddit.com/search.json?")


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("https://www.reddit.com", "/r/cats/", "https://www.reddit.com/r/cats/"),
        ("https://www.reddit.com/", "/r/cats/", "https://www.reddit.com/r/cats/"),
        ("https://www.reddit.com/", "r/cats/", "https://www.reddit.com/r/cats/"),
    ],
)
def test_join_with_base_url(base: str, path: str, expected: str) -> None:
    assert join_with_base_url(path, base) == expected
