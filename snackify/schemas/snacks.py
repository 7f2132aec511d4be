"""Schemas for snack, rating, comment and leaderboard endpoints."""

from datetime import datetime, timezone
import math

from pydantic import BaseModel, Field

from snackify.models import AverageRatings, Comment, RatingSubmission, Snack


class AveragesOut(BaseModel):
    """Per-field user averages for a snack.

    A field is null when a stored value could not be read as a number.
    """

    taste: float | None
    spiciness: float | None
    uniqueness: float | None
    count: int = Field(ge=0)

    @classmethod
    def from_averages(cls, averages: AverageRatings | None) -> "AveragesOut | None":
        if averages is None:
            return None
        return cls(
            taste=finite_or_none(averages.taste),
            spiciness=finite_or_none(averages.spiciness),
            uniqueness=finite_or_none(averages.uniqueness),
            count=averages.count,
        )


class SeededRatingsOut(BaseModel):
    taste: float
    spiciness: float
    uniqueness: float
    count: int


class SnackOut(BaseModel):
    """A catalog snack with its display score."""

    id: str
    name: str
    country: str
    category: str
    description: str
    image: str | None = None
    ratings: SeededRatingsOut | None = None
    averages: AveragesOut | None = None
    overall_average: float | None = Field(alias="overallAverage")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(
        cls, snack: Snack, averages: AverageRatings | None, overall: float
    ) -> "SnackOut":
        seeded = snack.ratings
        return cls(
            id=snack.id,
            name=snack.name,
            country=snack.country,
            category=snack.category,
            description=snack.description,
            image=snack.image,
            ratings=SeededRatingsOut(
                taste=seeded.taste,
                spiciness=seeded.spiciness,
                uniqueness=seeded.uniqueness,
                count=seeded.count,
            )
            if seeded
            else None,
            averages=AveragesOut.from_averages(averages),
            overall_average=finite_or_none(overall),
        )


class RatingCreate(BaseModel):
    """Request body for POST /snacks/{id}/ratings."""

    taste: int = Field(ge=1, le=5)
    spiciness: int = Field(ge=1, le=5)
    uniqueness: int = Field(ge=1, le=5)


class RatingOut(BaseModel):
    taste: int | None
    spiciness: int | None
    uniqueness: int | None
    submitted_at: datetime = Field(alias="submittedAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_submission(cls, submission: RatingSubmission) -> "RatingOut":
        return cls(
            taste=finite_or_none(submission.taste),
            spiciness=finite_or_none(submission.spiciness),
            uniqueness=finite_or_none(submission.uniqueness),
            submitted_at=_from_ms(submission.submitted_at),
        )


class FormDefaults(BaseModel):
    taste: int
    spiciness: int
    uniqueness: int


class RatingsResponse(BaseModel):
    """Response payload for GET /snacks/{id}/ratings."""

    snack_id: str = Field(alias="snackId")
    ratings: list[RatingOut]
    averages: AveragesOut | None
    form_defaults: FormDefaults = Field(alias="formDefaults")

    model_config = {"populate_by_name": True}


class RatingSubmitted(BaseModel):
    """Response payload for POST /snacks/{id}/ratings."""

    snack_id: str = Field(alias="snackId")
    averages: AveragesOut
    overall_average: float | None = Field(alias="overallAverage")

    model_config = {"populate_by_name": True}


class CommentCreate(BaseModel):
    """Request body for POST /snacks/{id}/comments."""

    text: str = Field(min_length=1, max_length=1000)
    author: str | None = Field(default=None, max_length=80)


class CommentOut(BaseModel):
    author: str
    text: str
    submitted_at: datetime = Field(alias="submittedAt")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentOut":
        return cls(
            author=comment.author,
            text=comment.text,
            submitted_at=_from_ms(comment.submitted_at),
        )


class LeaderboardEntryOut(BaseModel):
    rank: int = Field(ge=1, le=10)
    snack_id: str = Field(alias="snackId")
    name: str
    country: str
    score: float
    rating_count: int = Field(alias="ratingCount", ge=0)

    model_config = {"populate_by_name": True}


class LeaderboardResponse(BaseModel):
    """Response payload for GET /leaderboard."""

    entries: list[LeaderboardEntryOut] = Field(max_length=10)
    last_updated_at: datetime = Field(alias="lastUpdatedAt")

    model_config = {"populate_by_name": True}


def finite_or_none(value: float) -> float | None:
    return None if math.isnan(value) else value


def _from_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
