"""
Feed strategies — one per ranking mode, all behind the same contract:

    process_feed(candidate posts, query, author profiles) -> FeedPage

Every strategy filters first, ranks the survivors, and paginates last so
that page boundaries and total_elements reflect the filtered set.

  timestamp │ newest first, no I/O
  distance  │ nearest first from (user_lat, user_lon); stable on ties
  following │ ignores the supplied candidates; pulls posts by the users
            │ the requester follows, newest first
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Mapping, Optional, Sequence

from geofeed.clients.social_graph_client import SocialGraphClient
from geofeed.errors import InvalidQueryError
from geofeed.feed.filters import filter_posts
from geofeed.feed.geo import calculate_distance
from geofeed.feed.pagination import paginate
from geofeed.post_store import PostStore
from geofeed.schemas import AuthorProfile, FeedItem, FeedPage, FeedQuery, PostRecord, PostView

logger = logging.getLogger(__name__)

Profiles = Mapping[str, AuthorProfile]


class FeedMode(str, Enum):
    TIMESTAMP = "timestamp"
    DISTANCE = "distance"
    FOLLOWING = "following"


class FeedStrategy(ABC):
    mode: FeedMode
    # False when the strategy derives its own candidate set
    uses_candidates: bool = True

    def check_query(self, query: FeedQuery) -> None:
        """Raise InvalidQueryError if this mode cannot serve `query`."""

    @abstractmethod
    async def process_feed(
        self,
        posts: Sequence[PostRecord],
        query: FeedQuery,
        profiles: Optional[Profiles] = None,
    ) -> FeedPage:
        ...


def _newest_first(posts: list[PostRecord]) -> list[PostRecord]:
    return sorted(posts, key=lambda post: post.created_at, reverse=True)


class TimestampStrategy(FeedStrategy):
    mode = FeedMode.TIMESTAMP

    async def process_feed(self, posts, query, profiles=None):
        profiles = profiles or {}
        items = [
            FeedItem(post=PostView.from_record(post, query.user_id, profiles.get(post.posted_by)))
            for post in _newest_first(filter_posts(posts, query))
        ]
        return paginate(items, query.page, query.size)


class DistanceStrategy(FeedStrategy):
    mode = FeedMode.DISTANCE

    def __init__(self, legacy_overrides: bool = True) -> None:
        self.legacy_overrides = legacy_overrides

    def check_query(self, query: FeedQuery) -> None:
        if query.user_lat is None or query.user_lon is None:
            raise InvalidQueryError("Latitude and longitude are required for distance feed")

    async def process_feed(self, posts, query, profiles=None):
        self.check_query(query)
        profiles = profiles or {}

        items: list[FeedItem] = []
        for post in filter_posts(posts, query):
            if not post.has_location:
                # Nothing to measure against
                continue
            distance = calculate_distance(
                query.user_lat,
                query.user_lon,
                post.latitude,
                post.longitude,
                legacy_overrides=self.legacy_overrides,
            )
            items.append(
                FeedItem(
                    post=PostView.from_record(post, query.user_id, profiles.get(post.posted_by)),
                    distance=distance,
                )
            )

        # list.sort is stable: equal distances keep candidate order
        items.sort(key=lambda item: item.distance)
        return paginate(items, query.page, query.size)


class FollowingStrategy(FeedStrategy):
    mode = FeedMode.FOLLOWING
    uses_candidates = False

    def __init__(self, social_graph: SocialGraphClient, store: PostStore) -> None:
        self._social_graph = social_graph
        self._store = store

    def check_query(self, query: FeedQuery) -> None:
        if not query.user_id:
            raise InvalidQueryError("A requesting user is required for following feed")

    async def process_feed(self, posts, query, profiles=None):
        self.check_query(query)

        following = await self._social_graph.fetch_following(query.user_id, query.bearer_token)
        if following.is_empty:
            logger.info(
                "User %s follows nobody%s — returning empty feed",
                query.user_id,
                f" (social graph degraded: {following.reason})" if following.degraded else "",
            )
            return paginate([], query.page, query.size)

        authored = await self._store.find_by_author_in(following.user_ids)
        items = [
            FeedItem(
                post=PostView.from_record(
                    post, query.user_id, following.profiles.get(post.posted_by)
                )
            )
            for post in _newest_first(filter_posts(authored, query))
        ]
        return paginate(items, query.page, query.size)
