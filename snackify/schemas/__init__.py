"""Pydantic schemas for API request/response validation."""

from snackify.schemas.common import ErrorDetail, ErrorResponse
from snackify.schemas.snacks import (
    AveragesOut,
    CommentCreate,
    CommentOut,
    FormDefaults,
    LeaderboardEntryOut,
    LeaderboardResponse,
    RatingCreate,
    RatingOut,
    RatingsResponse,
    RatingSubmitted,
    SnackOut,
    finite_or_none,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "AveragesOut",
    "CommentCreate",
    "CommentOut",
    "FormDefaults",
    "LeaderboardEntryOut",
    "LeaderboardResponse",
    "RatingCreate",
    "RatingOut",
    "RatingsResponse",
    "RatingSubmitted",
    "SnackOut",
    "finite_or_none",
]
