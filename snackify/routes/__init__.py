"""API routes."""

from fastapi import APIRouter

from snackify.routes import leaderboard, snacks

api_router = APIRouter()

# Catalog, ratings and comments
api_router.include_router(snacks.router, prefix="/snacks", tags=["snacks"])

# Top-rated snacks
api_router.include_router(leaderboard.router, prefix="/leaderboard", tags=["leaderboard"])
