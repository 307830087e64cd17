"""Data models for cached editions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EditionRecord(BaseModel):
    """One generated edition as persisted in the store."""

    created_at: datetime = Field(..., description="When the record was built.")
    payload: Dict[str, Any] = Field(
        ..., description="Parsed newspaper document or the fallback shape."
    )

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str | bytes) -> "EditionRecord":
        """Parse a stored value; raises pydantic.ValidationError when malformed."""
        return cls.model_validate_json(text)


class NewsTitle(BaseModel):
    # Models sometimes emit numeric ids; keep whatever came back.
    id: Any = None
    title: Optional[str] = None


class EditionSummary(BaseModel):
    """Quick view of an edition: date, overview and headline list."""

    date: str
    overview: str = ""
    titles: List[NewsTitle] = Field(default_factory=list)
