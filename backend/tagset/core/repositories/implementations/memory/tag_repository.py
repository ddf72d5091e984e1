from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from tagset.core.repositories.tag_repository import ModelT, TagRepository
from tagset.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from tagset.core.schemas.tag_query import TagQuery


class InMemoryTagRepository(TagRepository[ModelT]):
    """Process-local implementation of the TagRepository.

    Rows are kept as JSON-mode dicts in insertion order and queries are evaluated
    with `TagQuery.matches`. Returned documents are copies, so local mutations
    never leak into the stored rows.
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model
        self._rows: dict[UUID, dict[str, Any]] = {}

    async def insert(self, document: ModelT) -> ModelT:
        row = document.model_dump(mode="json")
        self._rows[document.id] = row
        return self._row_to_model(row)

    async def get(self, document_id: UUID) -> ModelT | None:
        row = self._rows.get(document_id)
        if row is None:
            return None
        return self._row_to_model(row)

    async def push_unique(self, document_id: UUID, path: str, tag: str) -> None:
        row = self._rows.get(document_id)
        if row is None:
            logger.warning("push_unique matched no document", extra={"document_id": str(document_id)})
            return
        values = row.setdefault(path, [])
        if tag not in values:
            values.append(tag)

    async def pull_all(self, document_id: UUID, path: str, tag: str) -> None:
        row = self._rows.get(document_id)
        if row is None:
            logger.warning("pull_all matched no document", extra={"document_id": str(document_id)})
            return
        row[path] = [value for value in row.get(path) or [] if value != tag]

    async def find(self, query: TagQuery, *, limit: int | None = None) -> Sequence[ModelT]:
        rows = [row for row in self._rows.values() if query.matches(row)]
        if limit is not None:
            rows = rows[:limit]
        return [self._row_to_model(row) for row in rows]

    async def clear(self) -> None:
        self._rows.clear()

    def _row_to_model(self, row: dict[str, Any]) -> ModelT:
        return self.model.model_validate(copy.deepcopy(row))
