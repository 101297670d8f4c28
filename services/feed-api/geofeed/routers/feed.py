"""
Feed endpoints — one per ranking mode:

  GET /feed/timestamp  — newest first
  GET /feed/distance   — nearest first; lat & lon required
  GET /feed/following  — newest first, authors the requester follows

All three share the filter/pagination parameters:
  categories (repeatable), keyword, dateFrom, dateTo (ISO dates, inclusive),
  page (0-based), size.

Responses use the envelope {success, message, data}; data is a FeedPage.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from geofeed.clients.profile_client import profile_client
from geofeed.clients.social_graph_client import social_graph_client
from geofeed.config import settings
from geofeed.database import get_db
from geofeed.errors import InvalidQueryError, StoreError
from geofeed.feed.service import FeedService
from geofeed.feed.strategies import FeedMode
from geofeed.post_store import SqlPostStore
from geofeed.schemas import FeedQuery, FeedResponse
from geofeed.security import Requester, get_requester

logger = logging.getLogger(__name__)
router = APIRouter()


def get_feed_service(db: AsyncSession = Depends(get_db)) -> FeedService:
    return FeedService(SqlPostStore(db), social_graph_client, profile_client)


class FeedParams:
    """Query parameters common to every feed mode."""

    def __init__(
        self,
        categories: Optional[list[str]] = Query(None),
        keyword: Optional[str] = Query(None),
        date_from: Optional[date] = Query(None, alias="dateFrom"),
        date_to: Optional[date] = Query(None, alias="dateTo"),
        page: int = Query(0, ge=0),
        size: int = Query(settings.feed_default_page_size, ge=0),
    ) -> None:
        self.categories = categories
        self.keyword = keyword
        self.date_from = date_from
        self.date_to = date_to
        self.page = page
        self.size = min(size, settings.feed_max_page_size)

    def to_query(self, requester: Requester, **extra) -> FeedQuery:
        return FeedQuery.from_dates(
            date_from=self.date_from,
            date_to=self.date_to,
            categories=self.categories,
            keyword=self.keyword,
            page=self.page,
            size=self.size,
            user_id=requester.user_id,
            bearer_token=requester.token,
            **extra,
        )


def _error(status_code: int, message: str) -> JSONResponse:
    body = FeedResponse(success=False, message=message, data=None)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def _serve(service: FeedService, mode: FeedMode, query: FeedQuery):
    try:
        page = await service.get_feed(mode, query)
    except InvalidQueryError as exc:
        return _error(400, str(exc))
    except StoreError:
        return _error(500, "Failed to load posts")
    return FeedResponse(success=True, message="Posts retrieved successfully", data=page)


@router.get("/timestamp", response_model=FeedResponse)
async def timestamp_feed(
    params: FeedParams = Depends(),
    requester: Requester = Depends(get_requester),
    service: FeedService = Depends(get_feed_service),
):
    return await _serve(service, FeedMode.TIMESTAMP, params.to_query(requester))


@router.get("/distance", response_model=FeedResponse)
async def distance_feed(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    params: FeedParams = Depends(),
    requester: Requester = Depends(get_requester),
    service: FeedService = Depends(get_feed_service),
):
    # Missing coordinates are rejected by the distance strategy (400)
    query = params.to_query(requester, user_lat=lat, user_lon=lon)
    return await _serve(service, FeedMode.DISTANCE, query)


@router.get("/following", response_model=FeedResponse)
async def following_feed(
    params: FeedParams = Depends(),
    requester: Requester = Depends(get_requester),
    service: FeedService = Depends(get_feed_service),
):
    return await _serve(service, FeedMode.FOLLOWING, params.to_query(requester))
