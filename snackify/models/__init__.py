"""Domain records.

Records are plain frozen dataclasses:
- Snack / SeededRatings: catalog entries with optional pre-seeded scores
- RatingSubmission / AverageRatings: stored ratings and their derived means
- Comment: free-text remarks on a snack
"""

from snackify.models.comment import Comment
from snackify.models.rating import AverageRatings, RatingSubmission
from snackify.models.snack import SeededRatings, Snack

__all__ = ["AverageRatings", "Comment", "RatingSubmission", "SeededRatings", "Snack"]
