from __future__ import annotations

"""Repository selection.

`CATALOG_REPOSITORY_IMPL` names the implementation as 'module.sub:ClassName'.
Implementations expose `for_session(session)`; the SQL one wraps the session,
the in-memory one ignores it and returns its process-wide instance.
"""

from typing import Optional

from moviecatalog.core.config import settings
from moviecatalog.repositories.base import CatalogRepositoryProtocol


def _import_string(path: str):
    module_path, _, class_name = path.partition(":")
    if not module_path or not class_name:
        raise ValueError("CATALOG_REPOSITORY_IMPL must be 'module.sub:ClassName'")
    module = __import__(module_path, fromlist=[class_name])
    return getattr(module, class_name)


def get_catalog_repository(session=None, *, impl_path: Optional[str] = None) -> CatalogRepositoryProtocol:
    cls = _import_string(impl_path or settings.CATALOG_REPOSITORY_IMPL)
    return cls.for_session(session)


__all__ = ["CatalogRepositoryProtocol", "get_catalog_repository"]
