from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from moviecatalog.schemas.base import CamelModel


class ReviewIn(CamelModel):
    """Review payload; timestamps and movie are never client-supplied."""

    user_name: str = Field(..., examples=["John Doe"])
    review_text: Optional[str] = Field(None, examples=["Great movie! The plot was engaging."])
    rating: float = Field(..., examples=[8.5])


class ReviewOut(CamelModel):
    id: int
    movie_id: int
    user_name: str
    review_text: Optional[str] = None
    rating: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
