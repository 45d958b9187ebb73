from __future__ import annotations

"""
🔎 Search criteria
=================

Typed, all-optional filter sets for catalog and review searches. Each model
carries a single `check()` step that performs every semantic validation and
returns a normalized copy (strings trimmed, dates parsed). Nothing downstream
re-validates.

Rules (movies)
--------------
• A string filter that is provided but blank is an error, not "no filter".
• releaseYear / yearMin / yearMax ∈ [1900, current year + 5].
• minRating / maxRating ∈ [0.0, 10.0].
• yearMin ≤ yearMax and minRating ≤ maxRating when both are present.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from pydantic import Field

from moviecatalog.core.exceptions import InvalidSearchParameter
from moviecatalog.schemas.base import CamelModel

SEARCH_YEAR_MIN = 1900
SEARCH_YEAR_AHEAD = 5
MOVIE_RATING_MIN = 0.0
MOVIE_RATING_MAX = 10.0
REVIEW_RATING_MIN = 1.0
REVIEW_RATING_MAX = 10.0


def max_search_year(today: Optional[date] = None) -> int:
    return (today or datetime.now(timezone.utc).date()).year + SEARCH_YEAR_AHEAD


# ─────────────────────────────────────────────────────────────
# 🧰 Shared checks
# ─────────────────────────────────────────────────────────────
def _text(field: str, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        raise InvalidSearchParameter(field, "must not be empty or whitespace", value=value)
    return stripped


def _within(field: str, value: Any, low: float, high: float) -> None:
    if value is not None and not (low <= value <= high):
        raise InvalidSearchParameter(field, f"must be between {low:g} and {high:g}", value=value)


def _ordered(low_field: str, low: Any, high_field: str, high: Any) -> None:
    if low is not None and high is not None and low > high:
        raise InvalidSearchParameter(
            low_field,
            f"must be less than or equal to {high_field}",
            value=low,
        )


def _instant(field: str, raw: Optional[str], *, end_of_range: bool) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime; a bare end date covers the whole day."""
    text = _text(field, raw)
    if text is None:
        return None
    try:
        if "T" in text or " " in text:
            parsed = datetime.fromisoformat(text)
        else:
            day = date.fromisoformat(text)
            parsed = datetime.combine(day, time.min)
            if end_of_range:
                parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    except ValueError:
        raise InvalidSearchParameter(
            field, "must be an ISO-8601 date (YYYY-MM-DD) or datetime", value=raw
        ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ─────────────────────────────────────────────────────────────
# 🎬 Movies
# ─────────────────────────────────────────────────────────────
class MovieSearchCriteria(CamelModel):
    genre: Optional[str] = Field(None, description="Exact match, case-insensitive")
    title: Optional[str] = Field(None, description="Substring, case-insensitive")
    director: Optional[str] = Field(None, description="Substring, case-insensitive")
    release_year: Optional[int] = None
    year_min: Optional[int] = None
    year_max: Optional[int] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None

    def check(self, *, today: Optional[date] = None) -> "MovieSearchCriteria":
        """Validate every provided filter and return a trimmed copy.

        Raises
        ------
        InvalidSearchParameter
            Naming the first offending field (camelCase) and the reason.
        """
        genre = _text("genre", self.genre)
        title = _text("title", self.title)
        director = _text("director", self.director)

        top = max_search_year(today)
        _within("releaseYear", self.release_year, SEARCH_YEAR_MIN, top)
        _within("yearMin", self.year_min, SEARCH_YEAR_MIN, top)
        _within("yearMax", self.year_max, SEARCH_YEAR_MIN, top)
        _within("minRating", self.min_rating, MOVIE_RATING_MIN, MOVIE_RATING_MAX)
        _within("maxRating", self.max_rating, MOVIE_RATING_MIN, MOVIE_RATING_MAX)

        _ordered("yearMin", self.year_min, "yearMax", self.year_max)
        _ordered("minRating", self.min_rating, "maxRating", self.max_rating)

        return self.model_copy(update={"genre": genre, "title": title, "director": director})


# ─────────────────────────────────────────────────────────────
# ⭐ Reviews
# ─────────────────────────────────────────────────────────────
class ReviewSearchCriteria(CamelModel):
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    user_name: Optional[str] = Field(None, description="Substring, case-insensitive")
    start_date: Optional[str] = Field(None, description="ISO date/datetime, inclusive")
    end_date: Optional[str] = Field(None, description="ISO date/datetime, inclusive")

    # Filled by check(); not part of the wire format.
    created_from: Optional[datetime] = Field(None, exclude=True)
    created_to: Optional[datetime] = Field(None, exclude=True)

    def check(self) -> "ReviewSearchCriteria":
        user_name = _text("userName", self.user_name)
        _within("minRating", self.min_rating, REVIEW_RATING_MIN, REVIEW_RATING_MAX)
        _within("maxRating", self.max_rating, REVIEW_RATING_MIN, REVIEW_RATING_MAX)
        _ordered("minRating", self.min_rating, "maxRating", self.max_rating)

        created_from = _instant("startDate", self.start_date, end_of_range=False)
        created_to = _instant("endDate", self.end_date, end_of_range=True)
        if created_from is not None and created_to is not None and created_from > created_to:
            raise InvalidSearchParameter(
                "startDate", "must be on or before endDate", value=self.start_date
            )

        return self.model_copy(
            update={"user_name": user_name, "created_from": created_from, "created_to": created_to}
        )


__all__ = [
    "MovieSearchCriteria",
    "ReviewSearchCriteria",
    "max_search_year",
    "SEARCH_YEAR_MIN",
]
