"""Result records and remote listing envelope models."""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    model_validator,
)

IMAGE_EXTENSIONS: tuple[str, ...] = (".jpg", ".gif", ".png")


def format_created(created_utc: float | None) -> str:
    """Render epoch seconds as a local date/time display string.

    Args:
        created_utc: Seconds since the epoch, or None.

    Returns:
        Locale-formatted string, empty when the timestamp is missing or invalid.
    """
    if created_utc is None:
        return ""
    try:
        return datetime.fromtimestamp(created_utc).strftime("%c")
    except (OverflowError, OSError, ValueError):
        return ""


def preview_image_url(is_video: bool, override_url: str | None) -> str:
    """Derive the inline preview image for a post.

    Only directly renderable still images are previewed. Videos and
    arbitrary link destinations yield an empty string.

    Args:
        is_video: Whether the post itself is a video.
        override_url: The post's ``url_overridden_by_dest`` field.

    Returns:
        The override URL when it ends in a known image extension, else "".
    """
    if is_video or not override_url:
        return ""
    if not override_url.endswith(IMAGE_EXTENSIONS):
        return ""
    return override_url


class PostResult(BaseModel):
    """Normalized post search result.

    Attributes:
        kind: Always ``"post"``; tags the record in mixed result lists.
        id: Remote item identifier.
        title: Post title.
        url: Canonical URL of the post page.
        description: Self text body, if any.
        image_url: Inline preview image, empty when not previewable.
        created: Local display string of the creation time.
        thumbnail: Thumbnail value as sent by the remote API.
        subreddit: Owning subreddit name (without prefix).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["post"] = "post"
    id: str
    title: str
    url: str
    description: str | None = None
    image_url: str = ""
    created: str = ""
    thumbnail: str | None = None
    subreddit: str = ""

    @computed_field
    @property
    def icon_url(self) -> str | None:
        """Thumbnail usable as an icon; the remote API also sends
        placeholders such as ``"self"`` or ``"default"``."""
        if self.thumbnail and self.thumbnail.startswith(("http:", "https:")):
            return self.thumbnail
        return None

    @computed_field
    @property
    def accessory(self) -> str:
        return f"Posted {self.created} r/{self.subreddit}"

    @computed_field
    @property
    def detail_markdown(self) -> str | None:
        """Markdown for a detail view, or None when only a link makes sense."""
        if self.description:
            return self.description
        if self.image_url:
            return f'![{self.title}]({self.image_url} "{self.title}")'
        return None


class SubredditResult(BaseModel):
    """Normalized subreddit search result.

    Attributes:
        kind: Always ``"subreddit"``.
        id: Remote item identifier.
        title: Subreddit title.
        url: Canonical URL of the subreddit page.
        subreddit: Subreddit path (``/r/name/``), used as the favorites key.
        created: Local display string of the creation time.
        subreddit_name: Display name without the ``r/`` prefix.
        is_favorite: Whether the subreddit was a favorite when fetched.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["subreddit"] = "subreddit"
    id: str
    title: str
    url: str
    subreddit: str
    created: str = ""
    subreddit_name: str = ""
    is_favorite: bool = False


SearchResult = Annotated[PostResult | SubredditResult, Field(discriminator="kind")]


class SearchPage(BaseModel):
    """One page of search results.

    Attributes:
        items: Mapped results in remote order.
        after: Cursor for the next page, empty when there is none.
        url: Browser URL showing the same search on the site.
    """

    items: list[SearchResult]
    after: str = ""
    url: str = ""


class _RawItem(BaseModel):
    """Listing item whose JSON nulls fall back to field defaults."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RawPost(_RawItem):
    """Subset of a remote post (``t3``) listing item."""

    id: str
    title: str = ""
    permalink: str = ""
    selftext: str | None = None
    created_utc: float | None = None
    thumbnail: str | None = None
    subreddit: str = ""
    url_overridden_by_dest: str | None = None
    is_video: bool = False


class RawSubreddit(_RawItem):
    """Subset of a remote subreddit (``t5``) listing item."""

    id: str
    title: str = ""
    url: str = ""
    created_utc: float | None = None
    display_name_prefixed: str = ""


class ListingChild(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: dict[str, Any] | None = None


class ListingData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    children: list[ListingChild] | None = None
    after: str | None = None


class Listing(BaseModel):
    """Remote ``{data: {children: [...], after}}`` envelope.

    Every level is optional; a missing level parses as an empty listing.
    """

    model_config = ConfigDict(extra="ignore")

    data: ListingData | None = None

    @classmethod
    def parse(cls, payload: Any) -> "Listing":
        """Parse a decoded JSON body, degrading to an empty listing.

        Args:
            payload: Decoded JSON value.

        Returns:
            Parsed listing; empty when the envelope has an unexpected shape.
        """
        if not isinstance(payload, dict):
            return cls()
        try:
            return cls.model_validate(payload)
        except ValidationError:
            return cls()

    @property
    def items(self) -> list[dict[str, Any]]:
        if self.data is None or not self.data.children:
            return []
        return [child.data for child in self.data.children if child.data]

    @property
    def after(self) -> str:
        if self.data is None:
            return ""
        return self.data.after or ""
