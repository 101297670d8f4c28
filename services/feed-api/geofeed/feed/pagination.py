from typing import Sequence

from geofeed.errors import InvalidQueryError
from geofeed.schemas import FeedItem, FeedPage


def paginate(items: Sequence[FeedItem], page: int, size: int) -> FeedPage:
    """
    Slice one page out of the full filtered-and-ranked list.

    total_elements always reports the full list length, so an out-of-range
    page (or size 0) still tells the caller how much there is.
    """
    if page < 0 or size < 0:
        raise InvalidQueryError(f"page and size must be non-negative (page={page}, size={size})")

    start = page * size
    content = list(items[start:start + size]) if start < len(items) else []
    return FeedPage(content=content, total_elements=len(items), page=page, size=size)
