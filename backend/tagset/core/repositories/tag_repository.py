from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from tagset.core.models.taggable import Taggable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagset.core.schemas.tag_query import TagQuery

ModelT = TypeVar("ModelT", bound=Taggable)


class TagRepository(ABC, Generic[ModelT]):
    """Abstract storage interface for tagged documents.

    Contract used by `TagService`. Implementations perform I/O (database,
    network) and therefore expose async methods. Array updates must be atomic
    on the stored document; updates addressed to a missing id are no-ops.
    """

    model: type[ModelT]

    @abstractmethod
    async def insert(self, document: ModelT) -> ModelT:  # pragma: no cover - interface only
        """Persist a new document and return the stored entity."""

    @abstractmethod
    async def get(self, document_id: UUID) -> ModelT | None:  # pragma: no cover
        """Fetch a document by id or return None if not found."""

    @abstractmethod
    async def push_unique(self, document_id: UUID, path: str, tag: str) -> None:  # pragma: no cover
        """Append `tag` to the array at `path` unless it is already there."""

    @abstractmethod
    async def pull_all(self, document_id: UUID, path: str, tag: str) -> None:  # pragma: no cover
        """Remove every occurrence of `tag` from the array at `path`."""

    @abstractmethod
    async def find(self, query: TagQuery, *, limit: int | None = None) -> Sequence[ModelT]:  # pragma: no cover
        """Return documents matching `query` in storage order."""

    @abstractmethod
    async def clear(self) -> None:  # pragma: no cover
        """Delete every document in the collection."""
