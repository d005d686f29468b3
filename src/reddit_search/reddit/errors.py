"""Error kinds raised by the remote search client."""


class RedditSearchError(Exception):
    """Base class for search client failures."""


class RequestError(RedditSearchError):
    """Remote request failed with a non-success status or transport error.

    Attributes:
        status_code: HTTP status, or None when no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SearchCancelled(RedditSearchError):
    """Request was superseded or torn down before it completed.

    Deliberately not a RequestError: callers discard it silently
    instead of reporting it.
    """
