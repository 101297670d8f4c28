"""
Shared fixtures: post factory and in-memory stand-ins for the store and
the two upstream services.
"""
import os

# Must be set before geofeed.config is first imported
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("TRACING_ENABLED", "false")

import itertools
from datetime import datetime
from typing import Iterable, Optional

import pytest

from geofeed.clients.social_graph_client import FollowingResult
from geofeed.errors import StoreError
from geofeed.schemas import AuthorProfile, FeedQuery, PostRecord

_ids = itertools.count(1)


def make_post(
    *,
    created_at: datetime = datetime(2025, 3, 6, 12, 0),
    title: Optional[str] = "Lost wallet near the park",
    caption: Optional[str] = "Please help me find it",
    category: Optional[str] = "Lost Item",
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    posted_by: str = "author-1",
    votes: Optional[dict] = None,
    id: Optional[str] = None,
) -> PostRecord:
    return PostRecord(
        id=id or f"post-{next(_ids)}",
        title=title,
        caption=caption,
        category=category,
        latitude=latitude,
        longitude=longitude,
        created_at=created_at,
        posted_by=posted_by,
        votes=votes or {},
    )


def query(**fields) -> FeedQuery:
    fields.setdefault("user_id", "viewer")
    return FeedQuery(**fields)


class FakePostStore:
    def __init__(self, posts: Iterable[PostRecord] = (), fail: bool = False) -> None:
        self.posts = list(posts)
        self.fail = fail
        self.find_all_calls = 0
        self.author_lookups: list[list[str]] = []

    async def find_all(self) -> list[PostRecord]:
        self.find_all_calls += 1
        if self.fail:
            raise StoreError("Failed to load posts")
        return list(self.posts)

    async def find_by_author_in(self, user_ids: Iterable[str]) -> list[PostRecord]:
        ids = list(user_ids)
        self.author_lookups.append(ids)
        if self.fail:
            raise StoreError("Failed to load posts")
        return [p for p in self.posts if p.posted_by in ids]


class FakeSocialGraph:
    def __init__(self, result: FollowingResult) -> None:
        self.result = result
        self.calls: list[tuple] = []

    async def fetch_following(self, user_id, bearer_token=None) -> FollowingResult:
        self.calls.append((user_id, bearer_token))
        return self.result


class FakeProfiles:
    def __init__(self, profiles: Optional[dict] = None) -> None:
        self.profiles = profiles or {}
        self.requested: list[list[str]] = []

    async def fetch_profiles(self, user_ids) -> dict:
        ids = list(dict.fromkeys(user_ids))
        self.requested.append(ids)
        return {uid: self.profiles[uid] for uid in ids if uid in self.profiles}


def following(*profiles: AuthorProfile) -> FollowingResult:
    return FollowingResult(profiles={p.user_id: p for p in profiles})


@pytest.fixture
def alice() -> AuthorProfile:
    return AuthorProfile(user_id="alice", name="Alice Chen", profile_picture="https://cdn/alice.png")


@pytest.fixture
def bob() -> AuthorProfile:
    return AuthorProfile(user_id="bob", name="Bob Martinez")
