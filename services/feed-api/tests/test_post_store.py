from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from geofeed.database import Base
from geofeed.errors import StoreError
from geofeed.models import Post, Vote
from geofeed.post_store import SqlPostStore
from geofeed.schemas import VoteType


@pytest.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                Post(id="p1", title="Lost wallet", caption="near the park", category="Lost Item",
                     latitude=37.7749, longitude=-122.4194, created_at=datetime(2025, 3, 6, 20, 46),
                     posted_by="alice"),
                Post(id="p2", title=None, caption="Street light out", category=None,
                     created_at=datetime(2025, 3, 6, 21, 0), posted_by="bob"),
                Post(id="p3", title="Book left", caption="at Gramedia", category="Lost Book",
                     latitude=-6.37, longitude=106.83, created_at=datetime(2025, 3, 7, 8, 0),
                     posted_by="carol"),
            ]
        )
        session.add_all(
            [
                Vote(user_id="viewer", post_id="p1", is_upvote=True),
                Vote(user_id="bob", post_id="p1", is_upvote=False),
                Vote(user_id="carol", post_id="p1", is_upvote=True),
            ]
        )
        await session.commit()
        yield session

    await engine.dispose()


async def test_find_all_maps_rows_to_records(session):
    records = {r.id: r for r in await SqlPostStore(session).find_all()}

    assert set(records) == {"p1", "p2", "p3"}
    p1 = records["p1"]
    assert (p1.latitude, p1.longitude) == (37.7749, -122.4194)
    assert p1.upvote_count == 2 and p1.downvote_count == 1
    assert p1.current_vote("viewer") == VoteType.UPVOTE
    assert p1.current_vote("bob") == VoteType.DOWNVOTE
    assert not records["p2"].has_location
    assert records["p2"].votes == {}


async def test_find_by_author_in(session):
    store = SqlPostStore(session)

    records = await store.find_by_author_in(["alice", "carol", "nobody"])

    assert sorted(r.id for r in records) == ["p1", "p3"]
    assert await store.find_by_author_in([]) == []


async def test_database_errors_become_store_errors():
    class BrokenSession:
        async def execute(self, stmt):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

    with pytest.raises(StoreError) as excinfo:
        await SqlPostStore(BrokenSession()).find_all()

    assert isinstance(excinfo.value.__cause__, OperationalError)
