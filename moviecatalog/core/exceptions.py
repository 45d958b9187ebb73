# moviecatalog/core/exceptions.py
from __future__ import annotations

"""
MovieCatalog · Application Exceptions
=====================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
lets us attach structured metadata and integrate cleanly with the
problem+json shape rendered by `moviecatalog.core.exception_handlers`.

Key ideas
---------
- One base `AppException` that carries `code`, `request_id`, `details`, `extra`.
- Catalog exceptions inherit from it and set sane defaults.
- Every catalog error is terminal: callers fix the input, nothing is retried.
- Field-level failures expose `field_errors` (field, reason, rejected value).

Usage
-----
    raise MovieNotFound(movie_id)
    raise InvalidSearchParameter("minRating", "must be <= maxRating", value=9)
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "MovieNotFound",
    "ReviewNotFound",
    "FieldValidationException",
    "InvalidReviewData",
    "InvalidSearchParameter",
    "InvalidMovieData",
    "DuplicateMovie",
]

_UNSET: Any = object()


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code (e.g., 400/404/409/500).
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Typed error code. Defaults to `status_code`.
    request_id : str | None
        Optional request correlation id (handlers fall back to the middleware's).
    details : dict | list | str | None
        Machine-readable details (e.g., ids, constraints).
    extra : dict | None
        Additional non-sensitive metadata to surface to clients.
    headers : dict | None
        Optional response headers.
    """

    title: str = "Error"

    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        code: Optional[int] = None,
        request_id: Optional[str] = None,
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.request_id: Optional[str] = request_id
        self.details: Optional[Any] = details
        self.extra: Dict[str, Any] = extra or {}

    def __str__(self) -> str:
        return self.message

    # ── [Helper] Canonical body used by handlers ───────────────────────────
    def to_problem(self, *, fallback_request_id: Optional[str] = None) -> Dict[str, Any]:
        """Return a dict matching our problem+json shape (minus request-bound fields)."""
        body: Dict[str, Any] = {
            "type": "about:blank",
            "title": self.title,
            "status": self.status_code,
            "detail": self.message,
            "code": self.code,
            "request_id": self.request_id or fallback_request_id or "N/A",
        }
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


# ──────────────────────────────────────────────────────────────
# 🔎 Lookups
# ──────────────────────────────────────────────────────────────
class MovieNotFound(AppException):
    """Referenced movie id does not exist."""

    title = "Movie Not Found"

    def __init__(self, movie_id: Any) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=f"Movie not found with id: {movie_id}",
            code=40401,
            details={"movieId": movie_id},
        )
        self.movie_id = movie_id


class ReviewNotFound(AppException):
    """Review id absent, or it belongs to a different movie than the one claimed.

    Both cases produce the same message so a guessed id never reveals which
    movie actually owns the review.
    """

    title = "Review Not Found"

    def __init__(self, review_id: Any, *, movie_id: Any = None) -> None:
        message = (
            f"Review not found with id: {review_id}"
            if movie_id is None
            else f"Review not found with id: {review_id} for movie: {movie_id}"
        )
        details: Dict[str, Any] = {"reviewId": review_id}
        if movie_id is not None:
            details["movieId"] = movie_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            code=40402,
            details=details,
        )
        self.review_id = review_id
        self.movie_id = movie_id


# ──────────────────────────────────────────────────────────────
# 🧾 Field validation
# ──────────────────────────────────────────────────────────────
def field_error(field: str, reason: str, value: Any = _UNSET) -> Dict[str, Any]:
    """Build one `fieldErrors` entry; the value is omitted when not given."""
    err: Dict[str, Any] = {"field": field, "message": reason}
    if value is not _UNSET:
        err["rejectedValue"] = value
    return err


class FieldValidationException(AppException):
    """Base for 400s that point at one or more offending input fields."""

    title = "Bad Request"
    error_code: int = status.HTTP_400_BAD_REQUEST
    label: str = "Invalid input"

    def __init__(
        self,
        field: str,
        reason: str,
        *,
        value: Any = _UNSET,
        others: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        errors = [field_error(field, reason, value)] + list(others or [])
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=f"{self.label}: {field} {reason}",
            code=self.error_code,
            extra={"fieldErrors": errors},
        )
        self.field = field
        self.reason = reason
        self.value = None if value is _UNSET else value
        self.field_errors = errors

    @classmethod
    def from_field_errors(cls, errors: List[Dict[str, Any]]):
        """Build from a non-empty list produced by `field_error`."""
        first, *rest = errors
        return cls(first["field"], first["message"], value=first.get("rejectedValue", _UNSET), others=rest)


class InvalidReviewData(FieldValidationException):
    """Review content failed validation (userName, reviewText, rating)."""

    error_code = 40001
    label = "Invalid review data"


class InvalidSearchParameter(FieldValidationException):
    """A search, sort or pagination input is semantically invalid."""

    error_code = 40002
    label = "Invalid search parameter"


class InvalidMovieData(FieldValidationException):
    """Movie payload failed validation (title, director, genre, releaseYear)."""

    error_code = 40003
    label = "Invalid movie data"


# ──────────────────────────────────────────────────────────────
# ♻️ Conflicts
# ──────────────────────────────────────────────────────────────
class DuplicateMovie(AppException):
    """A movie with the same title and director already exists."""

    title = "Conflict"

    def __init__(self, title: str, director: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=f"Movie already exists with title '{title}' and director '{director}'",
            code=40901,
            details={"title": title, "director": director},
        )
