"""
🧩 Query / predicate builder
===========================

Turns validated search criteria into an explicit list of optional predicates
and a sort specification. Every predicate carries both forms the storage
layer may need:

- `clause` : a SQLAlchemy boolean expression (SQL repository)
- `test`   : a plain Python callable over a row (in-memory repository)

Absent criteria contribute no predicate; the remaining ones are folded with
AND, so application order never changes the result set.

Sort policy
-----------
`sort` is "field[,direction]". The field must be on the allow-list for the
resource and the direction must be `asc` or `desc` (default `asc`); anything
else is rejected with `InvalidSearchParameter`, the same as every other bad
search input.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import and_, func, true
from sqlalchemy.sql.elements import ColumnElement

from moviecatalog.core.exceptions import InvalidSearchParameter
from moviecatalog.db.models.movie import Movie
from moviecatalog.db.models.review import Review
from moviecatalog.schemas.search import MovieSearchCriteria, ReviewSearchCriteria


# ─────────────────────────────────────────────────────────────
# 🧱 Predicate
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Predicate:
    name: str
    clause: ColumnElement
    test: Callable[[Any], bool]

    def __call__(self, row: Any) -> bool:
        return self.test(row)


def conjoin(predicates: Iterable[Predicate]) -> ColumnElement:
    """AND of every clause; `true()` when there are none."""
    return and_(true(), *(p.clause for p in predicates))


def matches_all(predicates: Sequence[Predicate], row: Any) -> bool:
    return all(p(row) for p in predicates)


def _lower(value: Optional[str]) -> str:
    return (value or "").lower()


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


# ─────────────────────────────────────────────────────────────
# 🎬 Movie predicates (one optional builder per criterion)
# ─────────────────────────────────────────────────────────────
def _genre(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.genre is None:
        return None
    g = c.genre.lower()
    return Predicate("genre", func.lower(Movie.genre) == g, lambda m: _lower(m.genre) == g)


def _title(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.title is None:
        return None
    s = c.title.lower()
    return Predicate("title", func.lower(Movie.title).contains(s, autoescape=True), lambda m: s in _lower(m.title))


def _director(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.director is None:
        return None
    s = c.director.lower()
    return Predicate(
        "director",
        func.lower(Movie.director).contains(s, autoescape=True),
        lambda m: s in _lower(m.director),
    )


def _release_year(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.release_year is None:
        return None
    y = c.release_year
    return Predicate("releaseYear", Movie.release_year == y, lambda m: m.release_year == y)


def _year_min(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.year_min is None:
        return None
    y = c.year_min
    return Predicate("yearMin", Movie.release_year >= y, lambda m: m.release_year >= y)


def _year_max(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.year_max is None:
        return None
    y = c.year_max
    return Predicate("yearMax", Movie.release_year <= y, lambda m: m.release_year <= y)


def _min_rating(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.min_rating is None:
        return None
    r = _dec(c.min_rating)
    # Unrated movies never satisfy a rating bound.
    return Predicate("minRating", Movie.rating >= r, lambda m: m.rating is not None and _dec(m.rating) >= r)


def _max_rating(c: MovieSearchCriteria) -> Optional[Predicate]:
    if c.max_rating is None:
        return None
    r = _dec(c.max_rating)
    return Predicate("maxRating", Movie.rating <= r, lambda m: m.rating is not None and _dec(m.rating) <= r)


MOVIE_PREDICATE_BUILDERS: List[Callable[[MovieSearchCriteria], Optional[Predicate]]] = [
    _genre,
    _title,
    _director,
    _release_year,
    _year_min,
    _year_max,
    _min_rating,
    _max_rating,
]


def build_movie_predicates(criteria: MovieSearchCriteria) -> List[Predicate]:
    """One predicate per present criterion; expects `criteria.check()` output."""
    return [p for p in (build(criteria) for build in MOVIE_PREDICATE_BUILDERS) if p is not None]


def genre_predicate(genre: str) -> Predicate:
    """Case-insensitive exact genre match (used for counts)."""
    return _genre(MovieSearchCriteria(genre=genre))  # type: ignore[return-value]


# ─────────────────────────────────────────────────────────────
# ⭐ Review predicates
# ─────────────────────────────────────────────────────────────
def build_review_predicates(criteria: ReviewSearchCriteria) -> List[Predicate]:
    preds: List[Predicate] = []
    if criteria.min_rating is not None:
        lo = criteria.min_rating
        preds.append(Predicate("minRating", Review.rating >= lo, lambda r: r.rating >= lo))
    if criteria.max_rating is not None:
        hi = criteria.max_rating
        preds.append(Predicate("maxRating", Review.rating <= hi, lambda r: r.rating <= hi))
    if criteria.user_name is not None:
        s = criteria.user_name.lower()
        preds.append(
            Predicate(
                "userName",
                func.lower(Review.user_name).contains(s, autoescape=True),
                lambda r: s in _lower(r.user_name),
            )
        )
    if criteria.created_from is not None:
        start = criteria.created_from
        preds.append(Predicate("startDate", Review.created_at >= start, lambda r: r.created_at >= start))
    if criteria.created_to is not None:
        end = criteria.created_to
        preds.append(Predicate("endDate", Review.created_at <= end, lambda r: r.created_at <= end))
    return preds


# ─────────────────────────────────────────────────────────────
# ↕️ Sorting
# ─────────────────────────────────────────────────────────────
# public sort key → model attribute
MOVIE_SORT_FIELDS: Dict[str, str] = {
    "title": "title",
    "director": "director",
    "genre": "genre",
    "releaseYear": "release_year",
    "rating": "rating",
    "id": "id",
}

REVIEW_SORT_FIELDS: Dict[str, str] = {
    "rating": "rating",
    "createdAt": "created_at",
    "userName": "user_name",
    "id": "id",
}

SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class SortSpec:
    field: str       # public key, e.g. "releaseYear"
    attribute: str   # model attribute, e.g. "release_year"
    direction: str = "asc"

    @property
    def descending(self) -> bool:
        return self.direction == "desc"

    def __str__(self) -> str:
        return f"{self.field},{self.direction}"


def parse_sort(raw: Optional[str], allowed: Dict[str, str], *, default: str) -> SortSpec:
    """
    Parse "field[,direction]" against an allow-list.

    Field names match case-insensitively; a blank value means `default`.
    Unknown fields and directions raise `InvalidSearchParameter`.
    """
    text = (raw or "").strip() or default
    parts = [p.strip() for p in text.split(",")]
    if len(parts) > 2 or not parts[0]:
        raise InvalidSearchParameter("sort", "must look like 'field' or 'field,direction'", value=raw)

    by_lower = {k.lower(): k for k in allowed}
    key = by_lower.get(parts[0].lower())
    if key is None:
        raise InvalidSearchParameter(
            "sort", f"unknown sort field; allowed: {', '.join(allowed)}", value=parts[0]
        )

    direction = (parts[1] if len(parts) == 2 and parts[1] else "asc").lower()
    if direction not in SORT_DIRECTIONS:
        raise InvalidSearchParameter("sort", "direction must be 'asc' or 'desc'", value=parts[1])

    return SortSpec(field=key, attribute=allowed[key], direction=direction)


def order_by_clauses(model: Any, spec: SortSpec) -> list:
    """ORDER BY for `spec` with NULLs last and `id` as tiebreaker."""
    col = getattr(model, spec.attribute)
    primary = col.desc() if spec.descending else col.asc()
    clauses = [primary.nulls_last()]
    if spec.attribute != "id":
        clauses.append(model.id.asc())
    return clauses


def sort_rows(rows: Iterable[Any], spec: SortSpec) -> List[Any]:
    """In-memory mirror of `order_by_clauses`."""
    ordered = sorted(rows, key=lambda r: r.id)
    present = [r for r in ordered if getattr(r, spec.attribute) is not None]
    missing = [r for r in ordered if getattr(r, spec.attribute) is None]
    present.sort(key=lambda r: getattr(r, spec.attribute), reverse=spec.descending)
    return present + missing


__all__ = [
    "Predicate",
    "SortSpec",
    "MOVIE_SORT_FIELDS",
    "REVIEW_SORT_FIELDS",
    "build_movie_predicates",
    "build_review_predicates",
    "genre_predicate",
    "conjoin",
    "matches_all",
    "parse_sort",
    "order_by_clauses",
    "sort_rows",
]
