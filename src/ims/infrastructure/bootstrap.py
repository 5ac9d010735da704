"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import functools
from pathlib import Path

from ims.domain.exceptions import UnauthenticatedError
from ims.domain.model.user import UserRef
from ims.infrastructure.config import Settings, get_settings
from ims.infrastructure.persistence.json_store import JsonDocumentStore
from ims.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork

DATA_FILE_NAME = "ims.json"


@functools.lru_cache(maxsize=None)
def document_store(file_path: Path) -> JsonDocumentStore:
    """One store per data file, so every unit of work shares its locks."""
    return JsonDocumentStore(file_path)


def unit_of_work(settings: Settings | None = None) -> JsonUnitOfWork:
    settings = settings or get_settings()
    file_path = (settings.data_dir / DATA_FILE_NAME).resolve()
    return JsonUnitOfWork(document_store(file_path))


def current_user(settings: Settings | None = None) -> UserRef:
    """Resolve the acting user for order attribution."""
    settings = settings or get_settings()
    if not settings.user or not settings.user.strip():
        raise UnauthenticatedError(
            "No acting user: pass --user or set IMS_USER"
        )
    return UserRef(user_id=settings.user.strip())
