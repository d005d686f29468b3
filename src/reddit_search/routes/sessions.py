"""Stateful search session endpoints.

A session mirrors one search screen: the client pushes query, sort and
"load more" actions and renders the returned snapshot. A newer action on
the same session cancels the request of an older one.
"""

from fastapi import APIRouter, HTTPException, Request, status

from reddit_search.favorites.store import subreddit_key

from reddit_search.reddit.sort import RedditSort
from reddit_search.routes.favorites import SubredditName
from reddit_search.search.controller import SubredditSearchController
from reddit_search.search.schemas import (
    QueryRequest,
    SessionCreateRequest,
    SessionSnapshot,
    SortRequest,
)
from reddit_search.search.sessions import SearchSession, SessionRegistry

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def _get_session(request: Request, session_id: str) -> SearchSession:
    session = _registry(request).get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


def _parse_sort(value: str | None) -> RedditSort:
    try:
        return RedditSort.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


def _subreddit_controller(session: SearchSession) -> SubredditSearchController:
    if not isinstance(session.controller, SubredditSearchController):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session does not list subreddits",
        )
    return session.controller


@router.post(
    "",
    response_model=SessionSnapshot,
    status_code=status.HTTP_201_CREATED,
    responses={503: {"description": "Too many open sessions"}},
)
async def open_session(request: Request, body: SessionCreateRequest) -> SessionSnapshot:
    """Open an idle search session.

    Args:
        request: FastAPI request (provides access to app state).
        body: Session kind and optional subreddit scope.

    Returns:
        Snapshot of the new session.

    Raises:
        HTTPException: 503 if the session limit is reached.
    """
    try:
        session = _registry(request).create(body.kind, subreddit=body.subreddit)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e
    return session.snapshot()


@router.get("/{session_id}", response_model=SessionSnapshot)
async def get_session(request: Request, session_id: str) -> SessionSnapshot:
    """Return the current state of a session."""
    return _get_session(request, session_id).snapshot()


@router.post("/{session_id}/query", response_model=SessionSnapshot)
async def set_query(
    request: Request,
    session_id: str,
    body: QueryRequest,
) -> SessionSnapshot:
    """Run a fresh search for new query text.

    Waits for the request to finish. If a newer action on the same
    session supersedes it, the snapshot reflects that newer action.
    """
    session = _get_session(request, session_id)
    await session.controller.search(body.query, _parse_sort(body.sort))
    return session.snapshot()


@router.post("/{session_id}/sort", response_model=SessionSnapshot)
async def set_sort(
    request: Request,
    session_id: str,
    body: SortRequest,
) -> SessionSnapshot:
    """Re-run the current query with another sort option."""
    session = _get_session(request, session_id)
    await session.controller.change_sort(_parse_sort(body.sort))
    return session.snapshot()


@router.post("/{session_id}/more", response_model=SessionSnapshot)
async def load_more(request: Request, session_id: str) -> SessionSnapshot:
    """Append the next page of results."""
    session = _get_session(request, session_id)
    await session.controller.load_more()
    return session.snapshot()


@router.put("/{session_id}/favorites/{name}", response_model=SessionSnapshot)
async def add_session_favorite(
    request: Request,
    session_id: str,
    name: SubredditName,
) -> SessionSnapshot:
    """Star a subreddit from a subreddit session and flag it in the results.

    Args:
        request: FastAPI request (provides access to app state).
        session_id: Subreddit search session.
        name: Bare subreddit name.

    Returns:
        Snapshot with updated favorite flags.

    Raises:
        HTTPException: 404 if the session is missing or lists posts.
    """
    session = _get_session(request, session_id)
    _subreddit_controller(session).add_favorite(subreddit_key(name))
    return session.snapshot()


@router.delete("/{session_id}/favorites/{name}", response_model=SessionSnapshot)
async def remove_session_favorite(
    request: Request,
    session_id: str,
    name: SubredditName,
) -> SessionSnapshot:
    """Unstar a subreddit from a subreddit session."""
    session = _get_session(request, session_id)
    _subreddit_controller(session).remove_favorite(subreddit_key(name))
    return session.snapshot()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(request: Request, session_id: str) -> None:
    """Close a session, cancelling any outstanding request."""
    if not _registry(request).close(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
