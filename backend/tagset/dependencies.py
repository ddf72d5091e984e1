from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from tagset.config import settings
from tagset.core.repositories.implementations.memory.tag_repository import InMemoryTagRepository
from tagset.core.repositories.implementations.mongo.tag_repository import MongoTagRepository
from tagset.core.repositories.implementations.supabase.tag_repository import (
    SupabaseTagRepository,
)
from tagset.core.services.tag_service import TagService
from tagset.db.base import get_mongo_collection, get_supabase_client
from tagset.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from tagset.core.repositories.tag_repository import ModelT, TagRepository


def default_collection_name(model: type) -> str:
    return f"{model.__name__.lower()}s"


@lru_cache(maxsize=None)
def get_memory_repository(model: type[ModelT], name: str) -> InMemoryTagRepository[ModelT]:
    """Return the process-wide in-memory store for one model and collection."""
    return InMemoryTagRepository(model)


def get_tag_repository(model: type[ModelT], collection: str | None = None) -> TagRepository[ModelT]:
    """Build the repository selected by `settings.store_backend`.

    `collection` names the Mongo collection or Supabase table and defaults to
    the pluralized model name.
    """
    name = collection or default_collection_name(model)
    backend = settings.store_backend
    logger.debug("Creating tag repository", extra={"backend": backend, "collection": name})
    if backend == "mongo":
        return MongoTagRepository(model, get_mongo_collection(name))
    if backend == "supabase":
        return SupabaseTagRepository(model, get_supabase_client(), name)
    return get_memory_repository(model, name)


def get_tag_service(model: type[ModelT], collection: str | None = None) -> TagService[ModelT]:
    return TagService(get_tag_repository(model, collection))
