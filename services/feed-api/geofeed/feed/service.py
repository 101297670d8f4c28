"""
Feed orchestration: pick the strategy for the requested mode, load the
candidate set it needs, and hand back one page.

Only InvalidQueryError and StoreError leave this module; social-graph and
profile outages are absorbed by their clients.
"""
import logging
import time
from typing import Optional, Union

from opentelemetry import trace

from geofeed.clients.profile_client import ProfileClient
from geofeed.clients.social_graph_client import SocialGraphClient
from geofeed.config import settings
from geofeed.errors import InvalidQueryError, StoreError
from geofeed.feed.strategies import (
    DistanceStrategy,
    FeedMode,
    FeedStrategy,
    FollowingStrategy,
    TimestampStrategy,
)
from geofeed.post_store import PostStore
from geofeed.schemas import FeedPage, FeedQuery
from geofeed.telemetry import FEED_LATENCY, FEED_RESULTS_TOTAL

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class FeedService:
    def __init__(
        self,
        store: PostStore,
        social_graph: SocialGraphClient,
        profiles: ProfileClient,
        legacy_distance_overrides: Optional[bool] = None,
    ) -> None:
        if legacy_distance_overrides is None:
            legacy_distance_overrides = settings.distance_legacy_overrides

        self._store = store
        self._profiles = profiles
        self._strategies: dict[FeedMode, FeedStrategy] = {
            FeedMode.TIMESTAMP: TimestampStrategy(),
            FeedMode.DISTANCE: DistanceStrategy(legacy_overrides=legacy_distance_overrides),
            FeedMode.FOLLOWING: FollowingStrategy(social_graph, store),
        }

    async def timestamp_feed(self, query: FeedQuery) -> FeedPage:
        return await self.get_feed(FeedMode.TIMESTAMP, query)

    async def distance_feed(self, query: FeedQuery) -> FeedPage:
        return await self.get_feed(FeedMode.DISTANCE, query)

    async def following_feed(self, query: FeedQuery) -> FeedPage:
        return await self.get_feed(FeedMode.FOLLOWING, query)

    async def get_feed(self, mode: Union[FeedMode, str], query: FeedQuery) -> FeedPage:
        try:
            mode = FeedMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError:
            raise InvalidQueryError(f"Invalid feed type: {mode}") from None

        strategy = self._strategies[mode]
        # Reject bad queries before touching the store
        strategy.check_query(query)

        start = time.perf_counter()
        with tracer.start_as_current_span(f"feed.{mode.value}") as span:
            span.set_attribute("feed.mode", mode.value)
            span.set_attribute("feed.page", query.page)
            span.set_attribute("feed.size", query.size)

            try:
                if strategy.uses_candidates:
                    posts = await self._store.find_all()
                    span.set_attribute("feed.candidates", len(posts))
                else:
                    posts = []
                page = await strategy.process_feed(posts, query)
            except StoreError:
                logger.exception("Post store failure while building %s feed", mode.value)
                raise

            if strategy.uses_candidates:
                await self._attach_authors(page)
            span.set_attribute("feed.total", page.total_elements)

        FEED_LATENCY.labels(mode=mode.value).observe(time.perf_counter() - start)
        FEED_RESULTS_TOTAL.labels(mode=mode.value).inc(len(page.content))
        return page

    async def _attach_authors(self, page: FeedPage) -> None:
        """Swap in display profiles for the authors on this page only."""
        if not page.content:
            return
        profiles = await self._profiles.fetch_profiles(
            item.post.posted_by.user_id for item in page.content
        )
        for item in page.content:
            profile = profiles.get(item.post.posted_by.user_id)
            if profile is not None:
                item.post.posted_by = profile
