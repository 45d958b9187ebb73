"""
🎬 MovieCatalog backend
=======================

Catalog of movies and per-movie reviews with an eagerly maintained
aggregate rating and paginated multi-criteria search.
"""

__version__ = "1.0.0"
