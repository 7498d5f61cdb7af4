#!/usr/bin/env python3
"""
Seed the video catalogue with the bootstrap set of trending and new videos.

Usage: python -m vidshare.scripts.seed_database [--force]
"""
import argparse
import asyncio
import sys

from dotenv import load_dotenv
from sqlalchemy import delete, func, select

from vidshare.shared_lib.view_count import parse_view_count
from vidshare.web.app.db import AsyncSessionLocal, create_tables
from vidshare.web.app.models import ContentRating, Video

# Legacy catalogue entries carry their view counts in display form.
SEED_VIDEOS = [
    {"id": "trend-1", "title": "Mountain Sunrise Timelapse", "category": "Nature", "year": "2024",
     "rating": "G", "duration": "3:42", "views": "1.2M", "uploadDate": "2024-03-02",
     "description": "Six hours of alpine dawn condensed into four minutes."},
    {"id": "trend-2", "title": "Street Food Tour: Bangkok", "category": "Travel", "year": "2024",
     "rating": "PG", "duration": "18:05", "views": "845K", "uploadDate": "2024-02-11",
     "description": "Night markets, noodle stalls and a lot of chilli."},
    {"id": "trend-3", "title": "Building a Mechanical Keyboard", "category": "Technology", "year": "2023",
     "rating": "G", "duration": "24:31", "views": "530.4K", "uploadDate": "2023-11-20",
     "description": "From bare PCB to first keystroke."},
    {"id": "trend-4", "title": "The Last Lighthouse", "category": "Film", "year": "2023",
     "rating": "PG-13", "duration": "1:12:09", "views": "2.3M", "uploadDate": "2023-09-14",
     "description": "A short film about the keeper of a lighthouse nobody needs anymore."},
    {"id": "new-1", "title": "Sourdough From Scratch", "category": "Food", "year": "2025",
     "rating": "G", "duration": "12:47", "views": "9.8K", "uploadDate": "2025-01-08",
     "description": "Starter, shaping and the bake."},
    {"id": "new-2", "title": "Intro to Orbital Mechanics", "category": "Education", "year": "2025",
     "rating": "G", "duration": "45:00", "views": "900", "uploadDate": "2025-01-15",
     "description": "Why going faster makes you slower in orbit."},
    {"id": "new-3", "title": "Night Drive Synthwave Mix", "category": "Music", "year": "2025",
     "rating": "G", "duration": "1h 2m", "views": "47", "uploadDate": "2025-02-01",
     "description": "An hour of neon."},
    {"id": "new-4", "title": "Haunted Manor Walkthrough", "category": "Gaming", "year": "2025",
     "rating": "R", "duration": "32:10", "views": "0", "uploadDate": "2025-02-03",
     "description": "Every secret room, every jump scare."},
]


def build_video(entry: dict) -> Video:
    return Video(
        video_id=entry["id"],
        title=entry["title"],
        description=entry.get("description", ""),
        thumbnail=entry.get("thumbnail", f"/thumbnails/{entry['id']}.jpg"),
        url=entry.get("url", f"/media/{entry['id']}.mp4"),
        duration=entry.get("duration", "0:00"),
        category=entry.get("category", "Uncategorized"),
        year=entry["year"],
        rating=ContentRating(entry.get("rating", "G")),
        upload_date=entry["uploadDate"],
        view_count=parse_view_count(entry.get("views")),
        likes_count=0,
    )


async def seed(force: bool = False) -> int:
    await create_tables()

    async with AsyncSessionLocal() as session:
        existing = (await session.execute(select(func.count(Video.id)))).scalar() or 0
        if existing and not force:
            print(f"ℹ️  {existing} videos already present, skipping (use --force to replace)")
            return 0

        if existing:
            await session.execute(delete(Video))
            print("🗑️  Cleared existing videos")

        videos = [build_video(entry) for entry in SEED_VIDEOS]
        session.add_all(videos)
        await session.commit()

    print(f"✅ Seeded {len(videos)} videos")
    for index, video in enumerate(videos, start=1):
        print(f"   {index}. {video.video_id} - {video.title}")
    return len(videos)


def main(argv=None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Seed the video catalogue")
    parser.add_argument("--force", action="store_true", help="replace existing videos")
    args = parser.parse_args(argv)

    asyncio.run(seed(force=args.force))
    print("\n🎉 Database seeding completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
