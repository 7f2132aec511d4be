"""Comment record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from snackify.models.rating import load_timestamp


@dataclass(frozen=True)
class Comment:
    author: str
    text: str
    submitted_at: int

    def to_dict(self) -> dict[str, Any]:
        return {"author": self.author, "text": self.text, "timestamp": self.submitted_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Comment:
        return cls(
            author=str(data["author"]),
            text=str(data["text"]),
            submitted_at=load_timestamp(data["timestamp"]),
        )
