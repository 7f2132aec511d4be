#!/usr/bin/env python3
"""Seed the rating store with demo submissions.

Creates a few user ratings and comments per catalog snack so the leaderboard
and averages have data in local development.

Architecture note:
- Uses the same storage backend as the API (SNACKIFY_STORAGE, .env supported)
- Seed script is idempotent: snacks that already have ratings are skipped

Usage:
    python -m scripts.seed_ratings

Optional env vars:
  SEED_SNACKS="1,2,7"   only seed these snack ids
"""

import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from snackify.services.catalog import SNACKS  # noqa: E402
from snackify.settings import get_settings  # noqa: E402
from snackify.stores.comments import CommentStore  # noqa: E402
from snackify.stores.kv import StoreUnavailableError, build_storage  # noqa: E402
from snackify.stores.ratings import RatingStore  # noqa: E402

load_dotenv()

# (taste, spiciness, uniqueness) triples, cycled per snack
DEMO_RATINGS = [
    (4, 2, 5),
    (5, 1, 4),
    (3, 1, 3),
    (4, 3, 4),
]

DEMO_COMMENTS = [
    ("Mara", "Would buy again."),
    ("", "Interesting texture, not for everyone."),
]


def _selected_ids() -> set[str] | None:
    raw = os.getenv("SEED_SNACKS", "")
    if not raw.strip():
        return None
    return {p.strip() for p in raw.split(",") if p.strip()}


def seed_ratings() -> None:
    """Seed ratings and comments into the configured storage backend."""
    settings = get_settings()
    storage = build_storage(settings)
    ratings = RatingStore(storage, key=settings.ratings_key, strict=settings.strict_ratings)
    comments = CommentStore(storage, key=settings.comments_key)
    wanted = _selected_ids()

    print(f"🌱 Seeding ratings ({settings.storage_backend} backend)...")
    try:
        for index, snack in enumerate(SNACKS):
            if wanted is not None and snack.id not in wanted:
                continue
            if ratings.get_ratings(snack.id):
                print(f"  ⏭️  {snack.name} (has ratings)")
                continue

            averages = None
            # Vary the number of submissions so counts differ across snacks
            for taste, spiciness, uniqueness in DEMO_RATINGS[: 1 + index % len(DEMO_RATINGS)]:
                averages = ratings.submit_rating(snack.id, taste, spiciness, uniqueness)
            for author, text in DEMO_COMMENTS:
                comments.add_comment(snack.id, text, author=author)
            print(
                f"  ✅ {snack.name}: taste {averages.taste}, spiciness {averages.spiciness}, "
                f"uniqueness {averages.uniqueness} ({averages.count} ratings)"
            )
    except StoreUnavailableError as e:
        print(f"\n❌ Storage unavailable: {e}")
        raise SystemExit(1) from e
    finally:
        storage.close()

    print("\n✅ Ratings seeded successfully!")


if __name__ == "__main__":
    seed_ratings()
