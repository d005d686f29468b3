"""Registry of live search sessions keyed by identifier."""

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from reddit_search.favorites.store import FavoritesStore, subreddit_key
from reddit_search.reddit.client import RedditClient
from reddit_search.search.controller import (
    PostSearchController,
    SearchController,
    SubredditSearchController,
)
from reddit_search.search.schemas import SessionKind, SessionSnapshot, SortOption

logger = structlog.get_logger()


@dataclass
class SearchSession:
    """One search screen and its controller."""

    id: str
    kind: SessionKind
    controller: SearchController
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_access: float = 0.0

    def snapshot(self) -> SessionSnapshot:
        """Render the controller state for the presentation layer."""
        ctl = self.controller
        if isinstance(ctl, SubredditSearchController):
            ctl.refresh_favorites()
        return SessionSnapshot(
            id=self.id,
            kind=self.kind,
            scope=getattr(ctl, "scope", ""),
            state=ctl.state,
            loading=ctl.loading,
            query=ctl.query,
            sort=SortOption(
                name=ctl.sort.name.lower(),
                display_name=ctl.sort.display_name,
                value=ctl.sort.sort_value,
            ),
            results=ctl.results,
            view_all_url=ctl.view_all_url,
            after=ctl.after,
            error=ctl.error,
            created_at=self.created_at,
        )


class SessionRegistry:
    """Creates, looks up and tears down search sessions.

    Sessions a client abandons without closing are reclaimed: ones idle
    longer than idle_timeout are closed on the next create(), and at the
    cap the least recently used session without a request in flight
    makes room for the new one.

    Attributes:
        max_sessions: Maximum number of concurrently open sessions.
        idle_timeout: Seconds without access before a session expires.
    """

    def __init__(
        self,
        client: RedditClient,
        favorites: FavoritesStore,
        max_sessions: int = 100,
        idle_timeout: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize registry.

        Args:
            client: Shared remote API client.
            favorites: Favorites store handed to subreddit sessions.
            max_sessions: Maximum concurrently open sessions.
            idle_timeout: Seconds without access before a session expires.
            clock: Monotonic time source.
        """
        self._client = client
        self._favorites = favorites
        self._sessions: dict[str, SearchSession] = {}
        self._clock = clock
        self.max_sessions = max_sessions
        self.idle_timeout = idle_timeout

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, kind: SessionKind, subreddit: str | None = None) -> SearchSession:
        """Open a new session, reclaiming abandoned ones first.

        Args:
            kind: Result kind to search for.
            subreddit: Subreddit name restricting a post search.

        Returns:
            The new session.

        Raises:
            ValueError: If the cap is reached and every session is loading.
        """
        self._expire()
        if len(self._sessions) >= self.max_sessions:
            self._evict_least_recent()

        controller: SearchController
        if kind is SessionKind.SUBREDDITS:
            controller = SubredditSearchController(self._client, self._favorites)
        else:
            scope = subreddit_key(subreddit) if subreddit else ""
            controller = PostSearchController(self._client, scope=scope)

        session = SearchSession(
            id=str(uuid.uuid4()),
            kind=kind,
            controller=controller,
            last_access=self._clock(),
        )
        self._sessions[session.id] = session
        logger.info(
            "search_session_opened",
            session_id=session.id,
            kind=kind.value,
            active_sessions=len(self._sessions),
        )
        return session

    def get(self, session_id: str) -> SearchSession | None:
        """Look up a session and mark it as used."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_access = self._clock()
        return session

    def close(self, session_id: str) -> bool:
        """Close a session and cancel its outstanding request.

        Args:
            session_id: Session to close.

        Returns:
            True if the session existed.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        session.controller.close()
        logger.info(
            "search_session_closed",
            session_id=session_id,
            active_sessions=len(self._sessions),
        )
        return True

    def close_all(self) -> None:
        """Close every session, e.g. on application shutdown."""
        for session_id in list(self._sessions):
            self.close(session_id)

    def _expire(self) -> None:
        deadline = self._clock() - self.idle_timeout
        for session in list(self._sessions.values()):
            if session.last_access < deadline and not session.controller.loading:
                logger.info("search_session_expired", session_id=session.id)
                self.close(session.id)

    def _evict_least_recent(self) -> None:
        idle = [s for s in self._sessions.values() if not s.controller.loading]
        if not idle:
            raise ValueError("Maximum sessions reached")

        oldest = min(idle, key=lambda s: (s.last_access, s.created_at))
        logger.info("search_session_evicted", session_id=oldest.id)
        self.close(oldest.id)
