"""
🌱 Demo catalog seeding
======================

Fills an empty catalog with a fixed set of well-known movies and reviews.
Reviews go through `ReviewService.add_review`, so every seeded rating is the
real aggregate of its reviews. A catalog that already has movies is left
untouched.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from moviecatalog.repositories.base import CatalogRepositoryProtocol
from moviecatalog.services.movies import MovieService
from moviecatalog.services.reviews import ReviewService

log = logging.getLogger(__name__)

# (title, genre, release_year, director)
DEMO_MOVIES: List[Tuple[str, str, int, str]] = [
    ("Inception", "Sci-Fi", 2010, "Christopher Nolan"),
    ("The Dark Knight", "Action", 2008, "Christopher Nolan"),
    ("Interstellar", "Sci-Fi", 2014, "Christopher Nolan"),
    ("Pulp Fiction", "Crime", 1994, "Quentin Tarantino"),
    ("The Matrix", "Sci-Fi", 1999, "Lana Wachowski, Lilly Wachowski"),
    ("The Godfather", "Crime", 1972, "Francis Ford Coppola"),
    ("Casablanca", "Romance", 1942, "Michael Curtiz"),
    ("The Shining", "Horror", 1980, "Stanley Kubrick"),
    ("Finding Nemo", "Animation", 2003, "Andrew Stanton"),
    ("The Lion King", "Animation", 1994, "Roger Allers, Rob Minkoff"),
    ("Citizen Kane", "Drama", 1941, "Orson Welles"),
    ("2001: A Space Odyssey", "Sci-Fi", 1968, "Stanley Kubrick"),
    ("Star Wars", "Sci-Fi", 1977, "George Lucas"),
    ("E.T. the Extra-Terrestrial", "Sci-Fi", 1982, "Steven Spielberg"),
    ("Jurassic Park", "Adventure", 1993, "Steven Spielberg"),
    ("Avatar", "Sci-Fi", 2009, "James Cameron"),
    ("Titanic", "Romance", 1997, "James Cameron"),
    ("The Avengers", "Action", 2012, "Joss Whedon"),
    ("Spider-Man: Into the Spider-Verse", "Animation", 2018, "Bob Persichetti, Peter Ramsey, Rodney Rothman"),
    ("Parasite", "Thriller", 2019, "Bong Joon-ho"),
    ("Dune", "Sci-Fi", 2021, "Denis Villeneuve"),
    ("Everything Everywhere All at Once", "Comedy", 2022, "Daniels"),
    ("Top Gun: Maverick", "Action", 2022, "Joseph Kosinski"),
    ("Oppenheimer", "Biography", 2023, "Christopher Nolan"),
    ("Barbie", "Comedy", 2023, "Greta Gerwig"),
]

# title -> [(user_name, review_text, rating)]
DEMO_REVIEWS: Dict[str, List[Tuple[str, str, float]]] = {
    "Inception": [
        ("DreamExplorer", "Mind-bending concept with incredible visual effects.", 8.9),
        ("SciFiEnthusiast", "The concept of dream infiltration is fascinating.", 8.7),
        ("FilmStudent", "Complex narrative structure that rewards multiple viewings.", 8.8),
    ],
    "The Dark Knight": [
        ("John Doe", "Amazing performance by Heath Ledger as the Joker.", 9.5),
        ("Jane Smith", "Christopher Nolan at his best.", 9.0),
        ("MovieFan123", "A masterpiece of the genre.", 9.8),
    ],
    "Interstellar": [
        ("SpaceEnthusiast", "Mind-bending sci-fi with incredible visuals.", 8.8),
        ("SciFiLover", "The science is fascinating and the story is compelling.", 8.5),
    ],
    "Pulp Fiction": [
        ("TarantinoFan", "Revolutionary storytelling with unforgettable characters.", 9.2),
        ("FilmCritic", "The non-linear narrative and sharp dialogue make this influential.", 9.0),
        ("MovieBuff", "Quentin Tarantino's masterpiece.", 8.9),
    ],
    "The Matrix": [
        ("TechGuru", "Revolutionary special effects and a mind-bending story.", 8.7),
        ("PhilosophyStudent", "The philosophical themes combined with groundbreaking action.", 8.5),
    ],
    "The Godfather": [
        ("ClassicFilmLover", "The perfect crime drama.", 9.5),
        ("CinemaHistorian", "A masterpiece of American cinema.", 9.3),
        ("MovieEnthusiast", "One of the greatest films ever made.", 9.4),
    ],
    "Casablanca": [
        ("ClassicLover", "Timeless romance with unforgettable dialogue.", 8.6),
        ("FilmHistorian", "A perfect example of Golden Age Hollywood.", 8.4),
    ],
    "The Shining": [
        ("HorrorFan", "Kubrick's masterpiece of psychological horror.", 8.5),
        ("CinemaBuff", "The atmosphere and tension build perfectly.", 8.3),
    ],
    "Finding Nemo": [
        ("AnimationLover", "Heartwarming story with beautiful animation.", 8.3),
        ("FamilyViewer", "Pixar at their best.", 8.1),
    ],
    "The Lion King": [
        ("DisneyFan", "The circle of life! Beautiful animation and unforgettable songs.", 8.6),
        ("MusicalLover", "The soundtrack is incredible and the story is timeless.", 8.4),
    ],
    "Citizen Kane": [
        ("FilmCritic", "Revolutionary cinematography and storytelling.", 8.4),
        ("CinemaScholar", "The technical innovations alone make this a masterpiece.", 8.2),
    ],
    "Star Wars": [
        ("StarWarsFan", "A long time ago in a galaxy far, far away...", 8.7),
        ("SciFiLover", "Revolutionary special effects and a timeless story.", 8.5),
    ],
    "Avatar": [
        ("VisualEffectsFan", "Groundbreaking 3D technology and stunning visuals.", 7.9),
        ("SciFiViewer", "The story is familiar but the visual experience is revolutionary.", 7.7),
    ],
    "Titanic": [
        ("RomanceLover", "Epic love story with spectacular disaster sequences.", 7.9),
        ("HistoricalDramaFan", "The historical accuracy combined with the romance makes this unforgettable.", 7.7),
    ],
    "The Avengers": [
        ("MarvelFan", "The first time we see all these heroes together!", 8.1),
        ("SuperheroLover", "Perfect balance of action, humor, and character development.", 7.9),
    ],
    "Spider-Man: Into the Spider-Verse": [
        ("AnimationEnthusiast", "Revolutionary animation style that captures the comic book aesthetic.", 8.5),
        ("SpiderManFan", "Fresh take on Spider-Man with incredible visuals and heart.", 8.3),
    ],
    "Parasite": [
        ("InternationalFilmFan", "Brilliant social commentary wrapped in a thrilling story.", 8.7),
        ("ThrillerLover", "The genre shifts are masterful and the commentary on class is razor-sharp.", 8.5),
    ],
    "Dune": [
        ("SciFiReader", "Villeneuve captures the epic scale of Herbert's novel.", 8.1),
        ("EpicFilmFan", "Spectacular visuals and faithful adaptation.", 7.9),
    ],
    "Everything Everywhere All at Once": [
        ("MultiverseExplorer", "Mind-bending multiverse story with heart.", 7.9),
        ("IndieFilmLover", "Creative, emotional, and completely original.", 7.7),
    ],
    "Top Gun: Maverick": [
        ("ActionFan", "Spectacular aerial sequences and a worthy sequel to the original.", 8.4),
        ("SequelLover", "Rare sequel that improves on the original.", 8.2),
    ],
    "Oppenheimer": [
        ("BiographyFan", "Nolan's most mature film. Cillian Murphy delivers a career-defining performance.", 8.5),
        ("HistoricalDramaLover", "The tension builds perfectly as we approach the Trinity test.", 8.3),
    ],
    "Barbie": [
        ("ComedyLover", "Surprisingly deep commentary wrapped in a fun, colorful package.", 7.0),
        ("SocialCommentaryFan", "Gerwig tackles big themes with humor and heart.", 6.8),
    ],
}


async def seed_demo_catalog(repo: CatalogRepositoryProtocol) -> Tuple[int, int]:
    """Insert the demo catalog if no movie exists yet. Returns (movies, reviews) added."""
    existing = await repo.count_movies()
    if existing:
        log.info("Catalog already contains %s movies; skipping seeding", existing)
        return 0, 0

    movies, reviews = MovieService(repo), ReviewService(repo)
    added_reviews = 0
    for title, genre, year, director in DEMO_MOVIES:
        movie = await movies.create_movie(
            {"title": title, "genre": genre, "release_year": year, "director": director}
        )
        for user_name, text, rating in DEMO_REVIEWS.get(title, []):
            await reviews.add_review(movie.id, {"user_name": user_name, "review_text": text, "rating": rating})
            added_reviews += 1

    log.info("Seeded %s movies and %s reviews", len(DEMO_MOVIES), added_reviews)
    return len(DEMO_MOVIES), added_reviews


__all__ = ["seed_demo_catalog", "DEMO_MOVIES", "DEMO_REVIEWS"]
