# tests/conftest.py
"""
Global test bootstrap
- Points the app at the in-memory catalog repository
- Keeps logging quiet and startup seeding off
- Pulls in the shared fixtures (repo, app, clients, catalog helpers)
"""

from __future__ import annotations

import os

# ──────────────────────────────────────────────────────────────────────────────
# 🌱 Test env
#   NOTE: These are set BEFORE importing the app/fixtures so settings see them.
# ──────────────────────────────────────────────────────────────────────────────
os.environ.setdefault("ENV", "test")
os.environ.setdefault("CATALOG_REPOSITORY_IMPL", "moviecatalog.repositories.memory:MemoryCatalogRepository")
os.environ.setdefault("SEED_ON_STARTUP", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_TO_FILE", "0")

# ──────────────────────────────────────────────────────────────────────────────
# 📦 Fixtures
# ──────────────────────────────────────────────────────────────────────────────
from tests.fixtures.db import *          # noqa: F401,F403,E402
from tests.fixtures.app import *         # noqa: F401,F403,E402
from tests.fixtures.catalog import *     # noqa: F401,F403,E402
