"""
Movies and reviews.

- Create movies with the derived, nullable aggregate rating.
- Create reviews, cascading away with their movie.
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "20251016_01_movies_and_reviews"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- movies ---
    op.create_table(
        "movies",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("director", sa.String(length=255), nullable=False),
        sa.Column("genre", sa.String(length=100), nullable=False),
        sa.Column("release_year", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Numeric(3, 1), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_movies"),
        sa.UniqueConstraint("title", "director", name="uq_movies_title_director"),
        sa.CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 10)", name="ck_movies_rating_range"),
        sa.CheckConstraint("release_year >= 1888", name="ck_movies_release_year_min"),
    )
    op.create_index("ix_movies_genre", "movies", ["genre"], unique=False)
    op.create_index("ix_movies_release_year", "movies", ["release_year"], unique=False)
    op.create_index("ix_movies_rating", "movies", ["rating"], unique=False)

    # --- reviews ---
    op.create_table(
        "reviews",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("movie_id", sa.BigInteger(), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("review_text", sa.String(length=2000), nullable=True),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_reviews"),
        sa.ForeignKeyConstraint(
            ["movie_id"], ["movies.id"],
            name="fk_reviews_movie_id_movies",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("rating >= 1 AND rating <= 10", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_movie_id", "reviews", ["movie_id"], unique=False)
    op.create_index("ix_reviews_movie_created", "reviews", ["movie_id", "created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_reviews_movie_created", table_name="reviews")
    op.drop_index("ix_reviews_movie_id", table_name="reviews")
    op.drop_table("reviews")

    op.drop_index("ix_movies_rating", table_name="movies")
    op.drop_index("ix_movies_release_year", table_name="movies")
    op.drop_index("ix_movies_genre", table_name="movies")
    op.drop_table("movies")
