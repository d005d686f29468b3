"""Search URL construction for the browser and the JSON API."""

from urllib.parse import urlencode

DEFAULT_BASE_URL = "https://www.reddit.com"

SUBREDDIT_RESULT_TYPE = "sr"


def join_with_base_url(path: str, base_url: str = DEFAULT_BASE_URL) -> str:
    """Join a site-relative path such as a permalink with the base URL.

    Args:
        path: Path like ``/r/python/comments/abc/title/``. May be empty.
        base_url: Service base URL, with or without trailing slash.

    Returns:
        Absolute URL with exactly one slash at the join.
    """
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _search_path(scope: str, api: bool) -> str:
    endpoint = "search.json" if api else "search"
    scope = scope.strip("/")
    return f"{scope}/{endpoint}" if scope else endpoint


def _search_params(
    scope: str,
    query: str,
    result_type: str,
    sort: str,
) -> list[tuple[str, str | int]]:
    params: list[tuple[str, str | int]] = [("q", query)]
    if scope.strip("/"):
        params.append(("restrict_sr", 1))
    if result_type:
        params.append(("type", result_type))
    # relevance is the remote default and is never sent
    if sort and sort != "relevance":
        params.append(("sort", sort))
    return params


def build_browser_url(
    scope: str,
    query: str,
    result_type: str = "",
    sort: str = "",
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """Build the human-facing search page URL.

    The browser page paginates itself, so no limit or cursor is added.

    Args:
        scope: Empty for site-wide search, or a subreddit path (``/r/name/``).
        query: Literal query text.
        result_type: Empty for posts, ``"sr"`` for subreddits.
        sort: Remote sort value; empty or ``"relevance"`` omits it.
        base_url: Service base URL.

    Returns:
        Absolute URL suitable for opening in a browser.
    """
    url = join_with_base_url(_search_path(scope, api=False), base_url)
    return f"{url}?{urlencode(_search_params(scope, query, result_type, sort))}"


def build_api_url(
    scope: str,
    query: str,
    result_type: str = "",
    sort: str = "",
    page_size: int = 10,
    page_cursor: str = "",
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """Build the JSON API search URL.

    Args:
        scope: Empty for site-wide search, or a subreddit path (``/r/name/``).
        query: Literal query text.
        result_type: Empty for posts, ``"sr"`` for subreddits.
        sort: Remote sort value; empty or ``"relevance"`` omits it.
        page_size: Number of results to request.
        page_cursor: ``after`` token from a previous page, empty for the first.
        base_url: Service base URL.

    Returns:
        Absolute URL of the ``search.json`` endpoint.
    """
    params = _search_params(scope, query, result_type, sort)
    params.append(("limit", page_size))
    if page_cursor:
        params.append(("after", page_cursor))

    url = join_with_base_url(_search_path(scope, api=True), base_url)
    return f"{url}?{urlencode(params)}"
