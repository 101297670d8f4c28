"""
Pydantic schemas shared by the feed engine and the API layer.
Kept separate from ORM models to avoid coupling transport to storage.
"""
import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from geofeed.errors import InvalidQueryError


# ──────────────────────────── Posts ───────────────────────────────────────

class VoteType(str, Enum):
    UPVOTE = "UPVOTE"
    DOWNVOTE = "DOWNVOTE"
    NONE = "NONE"


class PostRecord(BaseModel):
    """A stored post, as handed to the feed engine (read-only)."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: Optional[str] = None
    caption: Optional[str] = None
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime
    posted_by: str
    # voter user_id -> True for upvote, False for downvote
    votes: Mapping[str, bool] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "PostRecord":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be both set or both absent")
        return self

    @property
    def has_location(self) -> bool:
        return self.latitude is not None

    @property
    def upvote_count(self) -> int:
        return sum(1 for up in self.votes.values() if up)

    @property
    def downvote_count(self) -> int:
        return sum(1 for up in self.votes.values() if not up)

    def current_vote(self, user_id: Optional[str]) -> VoteType:
        if user_id is None or user_id not in self.votes:
            return VoteType.NONE
        return VoteType.UPVOTE if self.votes[user_id] else VoteType.DOWNVOTE


# ──────────────────────────── Profiles ────────────────────────────────────

class AuthorProfile(BaseModel):
    """Display data for a post author; the upstream services speak camelCase."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    name: Optional[str] = None
    profile_picture: Optional[str] = Field(None, alias="profilePicture")


# ──────────────────────────── Feed ────────────────────────────────────────

class PostView(BaseModel):
    """Public fields of a post, annotated for the viewing user."""
    id: str
    title: Optional[str]
    caption: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    created_at: datetime
    category: Optional[str]
    upvote_count: int
    downvote_count: int
    current_vote: VoteType
    posted_by: AuthorProfile

    @classmethod
    def from_record(
        cls,
        post: PostRecord,
        viewer_id: Optional[str],
        author: Optional[AuthorProfile] = None,
    ) -> "PostView":
        return cls(
            id=post.id,
            title=post.title,
            caption=post.caption,
            latitude=post.latitude,
            longitude=post.longitude,
            created_at=post.created_at,
            category=post.category,
            upvote_count=post.upvote_count,
            downvote_count=post.downvote_count,
            current_vote=post.current_vote(viewer_id),
            posted_by=author or AuthorProfile(user_id=post.posted_by),
        )


class FeedItem(BaseModel):
    """One entry of a feed page; distance is only set by the distance feed."""
    post: PostView
    distance: Optional[float] = None


class FeedPage(BaseModel):
    content: list[FeedItem]
    total_elements: int
    page: int
    size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.size == 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @computed_field
    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @computed_field
    @property
    def has_previous(self) -> bool:
        return self.page > 0


class FeedQuery(BaseModel):
    """Per-request filter, pagination and requester context."""
    categories: Optional[list[str]] = None
    keyword: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    user_id: Optional[str] = None
    page: int = 0
    size: int = 10
    # Distance feed only
    user_lat: Optional[float] = Field(None, ge=-90, le=90)
    user_lon: Optional[float] = Field(None, ge=-180, le=180)
    # Forwarded to the social-graph service; never logged or serialised
    bearer_token: Optional[str] = Field(None, repr=False, exclude=True)

    @field_validator("page", "size")
    @classmethod
    def _non_negative(cls, value: int, info) -> int:
        if value < 0:
            raise InvalidQueryError(f"{info.field_name} must be non-negative, got {value}")
        return value

    @field_validator("date_from", "date_to")
    @classmethod
    def _naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Post timestamps are stored UTC-naive
        if value is not None and value.utcoffset() is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @classmethod
    def from_dates(
        cls,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        **fields,
    ) -> "FeedQuery":
        """Build a query from whole-day bounds; both days are fully included."""
        return cls(
            date_from=datetime.combine(date_from, time.min) if date_from else None,
            date_to=datetime.combine(date_to, time.max) if date_to else None,
            **fields,
        )


class FeedResponse(BaseModel):
    success: bool
    message: str
    data: Optional[FeedPage] = None
