from __future__ import annotations

from typing import TYPE_CHECKING, Generic

from tagset.core.repositories.tag_repository import ModelT
from tagset.core.schemas.tag_query import TagQuery
from tagset.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from tagset.core.repositories.tag_repository import TagRepository


class TagService(Generic[ModelT]):
    """Service persisting tag mutations for one document model.

    The local document is always mutated before the store is touched; the
    store is only called when the local mutation changed something. Storage
    errors propagate unchanged and the local change is kept.
    """

    def __init__(self, repo: TagRepository[ModelT]) -> None:
        self._repo = repo

    @property
    def model(self) -> type[ModelT]:
        return self._repo.model

    async def save(self, document: ModelT) -> ModelT:
        return await self._repo.insert(document)

    async def get(self, document_id: UUID) -> ModelT | None:
        return await self._repo.get(document_id)

    async def add_tag(self, document: ModelT, tag: str) -> bool:
        """Add `tag` locally and, if it was new, atomically on the stored copy."""
        if not document.add_tag(tag):
            return False
        await self._repo.push_unique(document.id, document.tag_path(), tag)
        logger.debug("Tag added", extra={"document_id": str(document.id), "tag": tag})
        return True

    async def remove_tag(self, document: ModelT, tag: str) -> bool:
        """Remove `tag` locally and, if it was present, from the stored copy."""
        if not document.remove_tag(tag):
            return False
        await self._repo.pull_all(document.id, document.tag_path(), tag)
        logger.debug("Tag removed", extra={"document_id": str(document.id), "tag": tag})
        return True

    async def find(self, query: TagQuery, *, limit: int | None = None) -> Sequence[ModelT]:
        return await self._repo.find(query, limit=limit)

    async def find_by_tags(
        self,
        include_tags: Iterable[str] | None = None,
        exclude_tags: Iterable[str] | None = None,
        *,
        query: TagQuery | None = None,
        limit: int | None = None,
    ) -> Sequence[ModelT]:
        """Shorthand for `find(Model.filter_by_tags(query, ...))`."""
        base = query if query is not None else TagQuery.all()
        filtered = self.model.filter_by_tags(base, include_tags, exclude_tags)
        return await self._repo.find(filtered, limit=limit)
