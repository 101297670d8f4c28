"""
Filter predicates shared by every feed mode.

All three are ANDed together by ``matches_query``; filtering keeps the
input order so later sorts can rely on it for tie-breaks.
"""
from datetime import datetime
from typing import Iterable, Optional, Sequence

from geofeed.schemas import FeedQuery, PostRecord


def matches_categories(post: PostRecord, categories: Optional[Sequence[str]]) -> bool:
    if not categories:
        return True
    return post.category is not None and post.category in categories


def matches_keyword(post: PostRecord, keyword: Optional[str]) -> bool:
    if not keyword:
        return True
    needle = keyword.lower()
    return (post.title is not None and needle in post.title.lower()) or (
        post.caption is not None and needle in post.caption.lower()
    )


def matches_date_range(
    post: PostRecord,
    date_from: Optional[datetime],
    date_to: Optional[datetime],
) -> bool:
    # Both bounds inclusive
    if date_from is not None and post.created_at < date_from:
        return False
    if date_to is not None and post.created_at > date_to:
        return False
    return True


def matches_query(post: PostRecord, query: FeedQuery) -> bool:
    return (
        matches_categories(post, query.categories)
        and matches_keyword(post, query.keyword)
        and matches_date_range(post, query.date_from, query.date_to)
    )


def filter_posts(posts: Iterable[PostRecord], query: FeedQuery) -> list[PostRecord]:
    return [post for post in posts if matches_query(post, query)]
