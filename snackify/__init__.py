"""Snackify API - snack ratings, comments and leaderboard."""
