"""Remote search client tests."""

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest
from conftest import listing, make_client, post_item, subreddit_item

from reddit_search.reddit.errors import RequestError, SearchCancelled
from reddit_search.reddit.schemas import PostResult, SubredditResult, format_created


def _params(request: httpx.Request) -> dict[str, list[str]]:
    return parse_qs(request.url.query.decode())


@pytest.mark.asyncio
async def test_search_posts_maps_items_and_preview_rules() -> None:
    """Video posts never get a preview; image destinations do."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=listing(
                [
                    post_item("a1", is_video=True, url_overridden_by_dest="https://v.redd.it/x.png"),
                    post_item("a2", url_overridden_by_dest="https://i.redd.it/cat.png"),
                ],
                after="t3_a2",
            ),
        )

    client = make_client(handler)
    page = await client.search_posts("", "cats")

    params = _params(seen[0])
    assert seen[0].url.path == "/search.json"
    assert params == {"q": ["cats"], "limit": ["10"]}

    assert [item.id for item in page.items] == ["a1", "a2"]
    assert page.items[0].image_url == ""
    assert page.items[1].image_url == "https://i.redd.it/cat.png"
    assert page.after == "t3_a2"
    assert page.url == "https://www.reddit.com/search?q=cats"


@pytest.mark.asyncio
async def test_search_posts_field_mapping() -> None:
    """Permalinks are joined with the base URL and timestamps rendered."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=listing([post_item("b1", title="Hello", selftext="body", subreddit="python")]),
        )

    page = await make_client(handler).search_posts("", "hello")
    post = page.items[0]

    assert isinstance(post, PostResult)
    assert post.title == "Hello"
    assert post.url == "https://www.reddit.com/r/python/comments/b1/a_post/"
    assert post.description == "body"
    assert post.subreddit == "python"
    assert post.created == format_created(1704067200.0)
    assert page.after == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "override",
    [
        "https://example.com/article",
        "https://i.imgur.com/cat.gifv",
        "https://i.redd.it/cat.jpeg",
        "https://i.redd.it/cat.PNG",
    ],
)
async def test_non_image_destination_has_no_preview(override: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=listing([post_item("c1", url_overridden_by_dest=override)]))

    page = await make_client(handler).search_posts("", "cats")
    assert page.items[0].image_url == ""


@pytest.mark.asyncio
@pytest.mark.parametrize("extension", [".jpg", ".gif", ".png"])
async def test_image_destination_is_previewed(extension: str) -> None:
    override = f"https://i.redd.it/cat{extension}"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=listing([post_item("d1", url_overridden_by_dest=override)]))

    page = await make_client(handler).search_posts("", "cats")
    assert page.items[0].image_url == override


@pytest.mark.asyncio
async def test_scoped_sorted_paged_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=listing([]))

    client = make_client(handler, result_limit=25)
    page = await client.search_posts("/r/python/", "asyncio", sort="new", page_cursor="t3_x")

    assert seen[0].url.path == "/r/python/search.json"
    assert _params(seen[0]) == {
        "q": ["asyncio"],
        "restrict_sr": ["1"],
        "sort": ["new"],
        "limit": ["25"],
        "after": ["t3_x"],
    }
    assert page.url == "https://www.reddit.com/r/python/search?q=asyncio&restrict_sr=1&sort=new"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"data": {}},
        {"data": {"children": None}},
        {"data": {"children": []}},
        {"data": "unexpected"},
        [],
    ],
)
async def test_missing_envelope_yields_empty_page(payload: object) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    page = await make_client(handler).search_posts("", "cats")
    assert page.items == []
    assert page.after == ""


@pytest.mark.asyncio
async def test_items_without_id_are_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=listing([{"kind": "t3", "data": {"title": "no id"}}, post_item("e1")]),
        )

    page = await make_client(handler).search_posts("", "cats")
    assert [item.id for item in page.items] == ["e1"]


@pytest.mark.asyncio
async def test_null_fields_fall_back_to_defaults() -> None:
    """Items with JSON null in optional fields are kept, not skipped."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("type") == "sr":
            children = [
                {
                    "kind": "t5",
                    "data": {
                        "id": "s1",
                        "title": None,
                        "url": "/r/cats/",
                        "display_name_prefixed": None,
                    },
                }
            ]
        else:
            children = [
                {
                    "kind": "t3",
                    "data": {
                        "id": "n1",
                        "title": None,
                        "permalink": None,
                        "is_video": None,
                        "subreddit": None,
                        "url_overridden_by_dest": "https://i.example.com/a.png",
                    },
                },
                {"kind": "t3", "data": {"id": None, "title": "no id"}},
            ]
        return httpx.Response(200, json=listing(children))

    client = make_client(handler)
    posts = await client.search_posts("", "cats")
    subreddits = await client.search_subreddits("cats")

    assert [item.id for item in posts.items] == ["n1"]
    post = posts.items[0]
    assert isinstance(post, PostResult)
    assert post.title == ""
    assert post.url == "https://www.reddit.com/"
    assert post.image_url == "https://i.example.com/a.png"

    assert [item.id for item in subreddits.items] == ["s1"]
    subreddit = subreddits.items[0]
    assert isinstance(subreddit, SubredditResult)
    assert subreddit.title == ""
    assert subreddit.subreddit_name == ""


@pytest.mark.asyncio
async def test_error_status_raises_request_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429)

    with pytest.raises(RequestError) as exc_info:
        await make_client(handler).search_posts("", "cats")

    assert exc_info.value.status_code == 429
    assert str(exc_info.value) == "Too Many Requests"


@pytest.mark.asyncio
async def test_transport_error_raises_request_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RequestError) as exc_info:
        await make_client(handler).search_posts("", "cats")

    assert exc_info.value.status_code is None
    assert "connection refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_invalid_json_raises_request_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>blocked</html>")

    with pytest.raises(RequestError, match="Invalid JSON"):
        await make_client(handler).search_posts("", "cats")


@pytest.mark.asyncio
async def test_already_set_cancel_raises_without_request() -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(200, json=listing([]))

    cancel = asyncio.Event()
    cancel.set()

    with pytest.raises(SearchCancelled):
        await make_client(handler).search_posts("", "cats", cancel=cancel)
    assert calls == 0


@pytest.mark.asyncio
async def test_cancel_during_request_raises_search_cancelled() -> None:
    started = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(10)
        return httpx.Response(200, json=listing([post_item("late")]))

    cancel = asyncio.Event()
    task = asyncio.create_task(make_client(handler).search_posts("", "cats", cancel=cancel))
    await started.wait()
    cancel.set()

    with pytest.raises(SearchCancelled):
        await asyncio.wait_for(task, timeout=1)


def test_search_cancelled_is_not_a_request_error() -> None:
    assert not issubclass(SearchCancelled, RequestError)


@pytest.mark.asyncio
async def test_search_subreddits() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=listing([subreddit_item("s1", "cats"), subreddit_item("s2", "catpictures")]),
        )

    page = await make_client(handler).search_subreddits("cat")

    assert _params(seen[0]) == {"q": ["cat"], "type": ["sr"], "limit": ["10"]}
    first = page.items[0]
    assert isinstance(first, SubredditResult)
    assert first.subreddit == "/r/cats/"
    assert first.url == "https://www.reddit.com/r/cats/"
    assert first.subreddit_name == "cats"
    assert first.is_favorite is False
    assert [item.subreddit_name for item in page.items] == ["cats", "catpictures"]
    assert page.url == "https://www.reddit.com/search?q=cat&type=sr"
