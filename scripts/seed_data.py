#!/usr/bin/env python3
"""
Seed script — creates a small geo-tagged dataset for trying the feeds.

Creates (only when the posts table is empty):
  • 8 posts across 4 categories, spread over San Francisco, New York,
    Los Angeles and Depok
  • A few up/down votes

Point DATABASE_URL_OVERRIDE at the store first, e.g.:
  DATABASE_URL_OVERRIDE=sqlite+aiosqlite:///./dev.db python scripts/seed_data.py

All author ids are printed so you can use them as X-User-Id in curl commands.
"""
import argparse
import asyncio
import random
from datetime import datetime

from sqlalchemy import func, select

from geofeed.database import AsyncSessionLocal, init_db
from geofeed.models import Post, Vote


AUTHORS = [
    "0b7c6c1e-2f1a-4d55-9a57-5d3b1f0e6a01",
    "5f2d9a44-7c3e-4b1a-8e62-0c9d1b7a4e02",
    "9a1e3b7c-4d2f-4e8a-b6c1-2f7e5d9c0a03",
]

# (title, caption, category, created_at, latitude, longitude)
SAMPLE_POSTS = [
    ("Lost wallet near the park",
     "Oh no! I lost my wallet near some park. Can somebody pls help me find it.",
     "Lost Item", "2025-03-06T20:46:39", 37.7749, -122.4194),
    ("Street light not working",
     "Come on.. I can't see anything in the dark!",
     "Infrastructure Issue", "2025-03-06T20:46:40", 40.7128, -74.006),
    ("Suspicious activity spotted",
     "I saw a person holding a knife! Should I call the police",
     "Crime Watch", "2025-03-06T20:46:42", 34.0522, -118.2437),
    ("Lost wallet near Pacil",
     "Purple wallet last seen in room 2403, please DM me if you find it.",
     "Lost Item", "2025-03-06T22:07:07", -6.365898347375627, 106.8267300354285),
    ("Book left at Gramedia Depok",
     "Someone left a book behind, whose is it?",
     "Lost Book", "2025-03-06T22:07:08", -6.370909783830162, 106.83398272852651),
    ("Flooded underpass",
     "Underpass on Margonda is flooded again, take the long way round.",
     "Infrastructure Issue", "2025-03-07T07:15:00", -6.3728, 106.8324),
    ("Found keys at the station",
     "Found a set of keys on platform 2, handed them to the guard.",
     "Lost Item", "2025-03-07T08:30:00", -6.3613, 106.8317),
    ("Broken pavement",
     "Watch your step, the pavement outside the library is cracked.",
     "Infrastructure Issue", "2025-03-07T09:05:00", None, None),
]


async def seed(votes_per_post: int) -> None:
    await init_db()

    async with AsyncSessionLocal() as session:
        existing = await session.scalar(select(func.count()).select_from(Post))
        if existing:
            print(f"ℹ️  {existing} posts already exist — skipping seeding.")
            return

        posts: list[Post] = []
        for idx, (title, caption, category, created_at, lat, lon) in enumerate(SAMPLE_POSTS):
            post = Post(
                title=title,
                caption=caption,
                category=category,
                created_at=datetime.fromisoformat(created_at),
                latitude=lat,
                longitude=lon,
                posted_by=AUTHORS[idx % len(AUTHORS)],
            )
            session.add(post)
            posts.append(post)
        await session.flush()  # materialise post ids

        votes = 0
        for post in posts:
            for voter in random.sample(AUTHORS, k=min(votes_per_post, len(AUTHORS))):
                session.add(Vote(user_id=voter, post_id=post.id, is_upvote=random.random() < 0.7))
                votes += 1

        await session.commit()

    print(f"✅ {len(posts)} posts and {votes} votes created")
    print("\nAuthors (use as X-User-Id):")
    for author in AUTHORS:
        print(f"  {author}")
    print("\n# Nearest-first feed around Depok:")
    print("  curl -s 'http://localhost:8000/feed/distance?lat=-6.3646&lon=106.8286' \\")
    print(f"    -H 'Authorization: Bearer dev' -H 'X-User-Id: {AUTHORS[0]}' | python3 -m json.tool")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the post store with geo-tagged posts")
    parser.add_argument("--votes-per-post", type=int, default=2, help="Random votes to add per post")
    args = parser.parse_args()
    asyncio.run(seed(args.votes_per_post))
