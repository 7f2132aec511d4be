"""Data stores for persistence.

Stores handle:
- Key-value storage backends (memory, JSON file, Redis)
- Ratings: append-only submissions per snack and their averages
- Comments: append-only remarks per snack

Ranking and display scores belong in services.
"""
