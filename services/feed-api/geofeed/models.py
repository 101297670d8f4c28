"""
SQLAlchemy ORM models for the post store.

Tables:
  posts — geo-tagged post metadata (latitude/longitude nullable as a pair)
  votes — user × post up/down votes; counts are aggregated from here

Both tables are written by the post-management service; the feed engine
only reads them.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geofeed.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[Optional[str]] = mapped_column(String(255))
    caption: Mapped[str] = mapped_column(Text, nullable=False)
    # Free-text tag, e.g. 'Lost Item'; matched case-sensitively
    category: Mapped[Optional[str]] = mapped_column(String(100))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    # UTC, stored without timezone
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    posted_by: Mapped[str] = mapped_column(String(36), nullable=False)

    votes = relationship("Vote", back_populates="post", lazy="noload")

    __table_args__ = (
        Index("idx_posts_posted_by", "posted_by"),
        Index("idx_posts_created", "created_at"),
    )


class Vote(Base):
    __tablename__ = "votes"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    post_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    is_upvote: Mapped[bool] = mapped_column(Boolean, nullable=False)

    post = relationship("Post", back_populates="votes")
