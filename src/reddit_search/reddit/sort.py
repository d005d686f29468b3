"""Sort options understood by the remote search API."""

from enum import Enum


class RedditSort(Enum):
    """Closed set of search orderings.

    Each member carries a display name and the literal ``sort`` query
    value sent to the remote API. Relevance is the remote default and
    maps to an empty value, which omits the parameter entirely.
    """

    RELEVANCE = ("Relevance", "")
    HOT = ("Hotest", "hot")
    TOP = ("Top", "top")
    LATEST = ("Latest", "new")
    COMMENTS = ("Comments", "comments")

    def __init__(self, display_name: str, sort_value: str) -> None:
        self.display_name = display_name
        self.sort_value = sort_value

    @classmethod
    def parse(cls, value: str | None) -> "RedditSort":
        """Resolve a sort option from a member name or remote sort value.

        Args:
            value: Member name (``"latest"``), remote value (``"new"``),
                or None/empty for relevance.

        Returns:
            Matching sort option.

        Raises:
            ValueError: If nothing matches.
        """
        if not value:
            return cls.RELEVANCE

        key = value.strip().lower()
        for option in cls:
            if key in (option.name.lower(), option.sort_value):
                return option

        raise ValueError(f"Unknown sort option: {value}")
