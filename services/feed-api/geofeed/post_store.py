"""
Read-only post store used as the feed engine's candidate source.

Any SQLAlchemy failure is re-raised as StoreError: without the candidate
set there is no meaningful partial feed.
"""
import logging
from typing import Iterable, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from geofeed.errors import StoreError
from geofeed.models import Post
from geofeed.schemas import PostRecord

logger = logging.getLogger(__name__)


class PostStore(Protocol):
    async def find_all(self) -> list[PostRecord]: ...

    async def find_by_author_in(self, user_ids: Iterable[str]) -> list[PostRecord]: ...


def to_record(post: Post) -> PostRecord:
    return PostRecord(
        id=post.id,
        title=post.title,
        caption=post.caption,
        category=post.category,
        latitude=post.latitude,
        longitude=post.longitude,
        created_at=post.created_at,
        posted_by=post.posted_by,
        votes={vote.user_id: vote.is_upvote for vote in post.votes},
    )


class SqlPostStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(self) -> list[PostRecord]:
        return await self._fetch(select(Post))

    async def find_by_author_in(self, user_ids: Iterable[str]) -> list[PostRecord]:
        ids = list(user_ids)
        if not ids:
            return []
        return await self._fetch(select(Post).where(Post.posted_by.in_(ids)))

    async def _fetch(self, stmt) -> list[PostRecord]:  # noqa: ANN001
        try:
            rows = await self._session.execute(stmt.options(selectinload(Post.votes)))
            return [to_record(post) for post in rows.scalars().all()]
        except SQLAlchemyError as exc:
            raise StoreError("Failed to load posts") from exc
