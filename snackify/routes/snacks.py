"""Snack catalog, rating and comment endpoints.

GET  /snacks                     - Catalog with display scores
GET  /snacks/{snackId}           - One snack with user averages
GET  /snacks/{snackId}/ratings   - Submissions, averages, form defaults
POST /snacks/{snackId}/ratings   - Submit a rating, returns new averages
GET  /snacks/{snackId}/comments  - Comments, oldest first
POST /snacks/{snackId}/comments  - Add a comment

Handlers are plain `def`: the stores do synchronous I/O, so FastAPI runs
them in its thread pool.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from snackify.dependencies import get_comment_store, get_rating_store
from snackify.models import Snack
from snackify.schemas import (
    AveragesOut,
    CommentCreate,
    CommentOut,
    FormDefaults,
    RatingCreate,
    RatingOut,
    RatingsResponse,
    RatingSubmitted,
    SnackOut,
    finite_or_none,
)
from snackify.services.catalog import get_snack_by_id, list_snacks
from snackify.services.rating import default_form_values, overall_average
from snackify.stores.comments import CommentStore
from snackify.stores.ratings import RatingStore

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

SnackId = Annotated[
    str,
    Path(description="Catalog snack id", min_length=1, max_length=64),
]


def _require_snack(snack_id: str) -> Snack:
    snack = get_snack_by_id(snack_id)
    if snack is None:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": "SNACK_NOT_FOUND",
                    "message": f"Snack {snack_id} not found",
                    "detail": {"snack_id": snack_id},
                }
            },
        )
    return snack


@router.get("", response_model=list[SnackOut])
def get_snacks(
    country: str | None = Query(default=None, description="Country of origin", examples=["Japan"]),
    category: str | None = Query(default=None, description="Snack category", examples=["chips"]),
    search: str | None = Query(default=None, description="Match on name or description"),
    store: RatingStore = Depends(get_rating_store),
) -> list[SnackOut]:
    """List catalog snacks with their display score."""
    return [
        SnackOut.build(snack, store.compute_averages(snack.id), overall_average(snack, store))
        for snack in list_snacks(country=country, category=category, search=search)
    ]


@router.get("/{snack_id}", response_model=SnackOut)
def get_snack(
    snack_id: SnackId,
    store: RatingStore = Depends(get_rating_store),
) -> SnackOut:
    """Get one snack with user averages (null when unrated)."""
    snack = _require_snack(snack_id)
    return SnackOut.build(snack, store.compute_averages(snack.id), overall_average(snack, store))


@router.get("/{snack_id}/ratings", response_model=RatingsResponse)
def get_snack_ratings(
    snack_id: SnackId,
    store: RatingStore = Depends(get_rating_store),
) -> RatingsResponse:
    """Get stored submissions for a snack in submission order."""
    snack = _require_snack(snack_id)
    submissions = store.get_ratings(snack.id) or []
    return RatingsResponse(
        snack_id=snack.id,
        ratings=[RatingOut.from_submission(s) for s in submissions],
        averages=AveragesOut.from_averages(store.compute_averages(snack.id)),
        form_defaults=FormDefaults(**default_form_values(snack)),
    )


@router.post(
    "/{snack_id}/ratings",
    response_model=RatingSubmitted,
    status_code=status.HTTP_201_CREATED,
)
def post_snack_rating(
    payload: RatingCreate,
    snack_id: SnackId,
    store: RatingStore = Depends(get_rating_store),
) -> RatingSubmitted:
    """Submit a rating and return the updated averages.

    Raises:
        HTTPException 404: If snack not found.
    """
    snack = _require_snack(snack_id)
    averages = store.submit_rating(
        snack.id,
        payload.taste,
        payload.spiciness,
        payload.uniqueness,
    )
    logger.info(f"Snack {snack.id} rated, overall now {averages.overall:.2f}")
    return RatingSubmitted(
        snack_id=snack.id,
        averages=AveragesOut.from_averages(averages),
        overall_average=finite_or_none(averages.overall),
    )


@router.get("/{snack_id}/comments", response_model=list[CommentOut])
def get_snack_comments(
    snack_id: SnackId,
    comments: CommentStore = Depends(get_comment_store),
) -> list[CommentOut]:
    snack = _require_snack(snack_id)
    return [CommentOut.from_comment(c) for c in comments.get_comments(snack.id)]


@router.post(
    "/{snack_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
def post_snack_comment(
    payload: CommentCreate,
    snack_id: SnackId,
    comments: CommentStore = Depends(get_comment_store),
) -> CommentOut:
    snack = _require_snack(snack_id)
    comment = comments.add_comment(snack.id, payload.text, author=payload.author)
    return CommentOut.from_comment(comment)
