#!/usr/bin/env python3
"""
MovieCatalog • Seed Demo Catalog
===============================

Loads the demo movies and reviews into an empty catalog. Ratings are derived
from the seeded reviews through the normal review lifecycle. A catalog that
already holds movies is left untouched.

Usage
-----
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --database-url postgresql+asyncpg://u:p@localhost:5432/movies
"""

import argparse
import asyncio
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--database-url", help="Overrides DATABASE_URL for this run")
    args = ap.parse_args()

    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    # settings are read at import time, so import after the override
    from moviecatalog.core import logger as _logsetup  # noqa: F401
    from moviecatalog.db.session import async_engine, session_scope
    from moviecatalog.repositories import get_catalog_repository
    from moviecatalog.services.seed import seed_demo_catalog

    async def _run() -> tuple:
        try:
            async with session_scope() as session:
                return await seed_demo_catalog(get_catalog_repository(session))
        finally:
            await async_engine.dispose()

    movies, reviews = asyncio.run(_run())
    if movies:
        print(f"Seeded {movies} movies and {reviews} reviews.")
    else:
        print("Catalog already populated; nothing to do.")


if __name__ == "__main__":
    main()
