from __future__ import annotations

"""
⭐ MovieCatalog · Review
=======================

One user's rating (1.0–10.0) and optional text for a `Movie`.

Conventions
-----------
• `movie_id` is fixed at creation; updates never move a review.
• `created_at` / `updated_at` are system-assigned.
"""

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    String,
)
from sqlalchemy.orm import relationship

from moviecatalog.db.base_class import Base, PKMixin, TimestampMixin

USER_NAME_MAX = 100
REVIEW_TEXT_MAX = 2000
MIN_RATING = 1.0
MAX_RATING = 10.0


class Review(PKMixin, TimestampMixin, Base):
    """A rating plus optional commentary attached to exactly one movie."""

    __tablename__ = "reviews"

    movie_id = Column(BigInteger, ForeignKey("movies.id", ondelete="CASCADE"),
                      nullable=False, index=True, doc="Owning movie (immutable).")
    user_name = Column(String(USER_NAME_MAX), nullable=False)
    review_text = Column(String(REVIEW_TEXT_MAX), nullable=True)
    rating = Column(Float, nullable=False, doc="Individual rating, 1.0..10.0.")

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 10", name="rating_range"),
        Index("ix_reviews_movie_created", "movie_id", "created_at"),
    )

    movie = relationship("Movie", back_populates="reviews", lazy="raise")
