"""Pytest configuration and fixtures."""

import asyncio
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import httpx
import pytest
from fastapi.testclient import TestClient

from reddit_search.app import create_app
from reddit_search.config import Settings
from reddit_search.favorites import FavoritesStore, LocalStorage
from reddit_search.reddit import RedditClient
from reddit_search.search import SessionRegistry

BASE_URL = "https://www.reddit.com"

Handler = Callable[[httpx.Request], httpx.Response]
UseRemote = Callable[[Handler], None]


def post_item(
    id: str,
    title: str = "A post",
    is_video: bool = False,
    url_overridden_by_dest: str | None = None,
    selftext: str | None = None,
    thumbnail: str | None = "self",
    subreddit: str = "cats",
) -> dict:
    """Build a remote post listing child."""
    data = {
        "id": id,
        "title": title,
        "permalink": f"/r/{subreddit}/comments/{id}/a_post/",
        "created_utc": 1704067200.0,
        "thumbnail": thumbnail,
        "subreddit": subreddit,
        "is_video": is_video,
    }
    if url_overridden_by_dest is not None:
        data["url_overridden_by_dest"] = url_overridden_by_dest
    if selftext is not None:
        data["selftext"] = selftext
    return {"kind": "t3", "data": data}


def subreddit_item(id: str, name: str) -> dict:
    """Build a remote subreddit listing child."""
    return {
        "kind": "t5",
        "data": {
            "id": id,
            "title": f"The {name} community",
            "url": f"/r/{name}/",
            "created_utc": 1200000000.0,
            "display_name_prefixed": f"r/{name}",
        },
    }


def listing(children: list[dict], after: str | None = None) -> dict:
    return {"kind": "Listing", "data": {"children": children, "after": after}}


def make_client(
    handler: Handler,
    result_limit: int = 10,
) -> RedditClient:
    """Create a RedditClient whose requests are answered by handler."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RedditClient(http, base_url=BASE_URL, result_limit=result_limit)


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def favorites(storage: LocalStorage) -> FavoritesStore:
    return FavoritesStore(storage)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        storage_path=tmp_path / "storage.json",
        max_sessions=3,
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Create test client with a started app."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def remote(client: TestClient) -> Iterator[UseRemote]:
    """Point the started app at a mocked remote API.

    Clients and sessions created through the returned callable are
    closed when the test finishes.
    """
    state = client.app.state
    created: list[tuple[RedditClient, SessionRegistry]] = []

    def use(handler: Handler) -> None:
        reddit = make_client(handler)
        sessions = SessionRegistry(
            reddit,
            state.favorites,
            max_sessions=state.settings.max_sessions,
        )
        state.reddit_client = reddit
        state.sessions = sessions
        created.append((reddit, sessions))

    yield use

    for reddit, sessions in created:
        sessions.close_all()
        asyncio.run(reddit.aclose())
