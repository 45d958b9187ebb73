from __future__ import annotations

"""
🎬 MovieCatalog · Movie
=======================

A catalog entry with a **denormalized aggregate rating**.

Conventions
-----------
• `rating` is derived: NULL while the movie has no reviews, otherwise the
  mean of its review ratings rounded half-up to one decimal (0.0–10.0).
  Only the review lifecycle writes it; client payloads never set it.
• (title, director) is unique.
• Deleting a movie deletes its reviews (FK `ON DELETE CASCADE`).

Relationships
-------------
• `Movie.reviews` ↔ `Review.movie`
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from moviecatalog.db.base_class import Base, PKMixin, TimestampMixin

TITLE_MAX = 255
DIRECTOR_MAX = 255
GENRE_MAX = 100
EARLIEST_RELEASE_YEAR = 1888


class Movie(PKMixin, TimestampMixin, Base):
    """A movie and its eagerly maintained aggregate rating."""

    __tablename__ = "movies"

    title = Column(String(TITLE_MAX), nullable=False, doc="Display title.")
    director = Column(String(DIRECTOR_MAX), nullable=False, doc="Director name(s).")
    genre = Column(String(GENRE_MAX), nullable=False, doc="Single primary genre, e.g. 'Sci-Fi'.")
    release_year = Column(Integer, nullable=False)
    rating = Column(Numeric(3, 1, asdecimal=True), nullable=True,
                    doc="Aggregate of review ratings; NULL when there are none.")

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        UniqueConstraint("title", "director", name="uq_movies_title_director"),
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 10)", name="rating_range"),
        CheckConstraint(f"release_year >= {EARLIEST_RELEASE_YEAR}", name="release_year_min"),
        Index("ix_movies_genre", "genre"),
        Index("ix_movies_release_year", "release_year"),
        Index("ix_movies_rating", "rating"),
    )

    reviews = relationship(
        "Review",
        back_populates="movie",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )
