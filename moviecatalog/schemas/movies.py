from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from moviecatalog.schemas.base import CamelModel


class MovieIn(CamelModel):
    """Create/replace payload. `rating` is derived and never accepted here."""

    title: str = Field(..., examples=["Inception"])
    director: str = Field(..., examples=["Christopher Nolan"])
    genre: str = Field(..., examples=["Sci-Fi"])
    release_year: int = Field(..., examples=[2010])


class MovieOut(CamelModel):
    id: int
    title: str
    director: str
    genre: str
    release_year: int
    rating: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _decimal_to_float(cls, v):
        return float(v) if isinstance(v, Decimal) else v


class AverageRatingOut(CamelModel):
    average_rating: Optional[float] = None
    rated_movies: int = 0


class GenreCountOut(CamelModel):
    genre: str
    count: int
