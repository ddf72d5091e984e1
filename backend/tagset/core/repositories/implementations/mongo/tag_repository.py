from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tagset.core.repositories.tag_repository import ModelT, TagRepository
from tagset.core.schemas.tag_query import ContainsNone, ContainsTag
from tagset.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from motor.motor_asyncio import AsyncIOMotorCollection

    from tagset.core.schemas.tag_query import TagQuery


def to_mongo_filter(query: TagQuery) -> dict[str, Any]:
    """Translate a TagQuery into a MongoDB filter document.

    Include conditions become `{path: tag}` (array contains), the exclude
    condition becomes `{path: {"$nin": [...]}}`.
    """
    mongo_filter: dict[str, Any] = {}
    for key, value in query.criteria.items():
        if key == "id":
            mongo_filter["_id"] = str(value)
        else:
            mongo_filter[key] = value

    clauses: list[dict[str, Any]] = []
    for condition in query.conditions:
        if isinstance(condition, ContainsTag):
            clauses.append({condition.path: condition.tag})
        elif isinstance(condition, ContainsNone):
            clauses.append({condition.path: {"$nin": list(condition.tags)}})
    if clauses:
        mongo_filter["$and"] = clauses
    return mongo_filter


class MongoTagRepository(TagRepository[ModelT]):
    """MongoDB implementation of the TagRepository.

    Uses motor against one collection. Documents are stored with their id
    as a string `_id`; tag updates use `$addToSet` and `$pull` so they are
    atomic on the server. Natural order is not guaranteed by MongoDB, so
    `find` sorts on `order_by` when one is given.
    """

    def __init__(
        self,
        model: type[ModelT],
        collection: AsyncIOMotorCollection,
        *,
        order_by: str | None = None,
    ) -> None:
        self.model = model
        self._collection = collection
        self._order_by = order_by

    async def insert(self, document: ModelT) -> ModelT:
        await self._collection.insert_one(self._model_to_doc(document))
        return document

    async def get(self, document_id: UUID) -> ModelT | None:
        doc = await self._collection.find_one({"_id": str(document_id)})
        if doc is None:
            return None
        return self._doc_to_model(doc)

    async def push_unique(self, document_id: UUID, path: str, tag: str) -> None:
        result = await self._collection.update_one(
            {"_id": str(document_id)},
            {"$addToSet": {path: tag}},
        )
        if result.matched_count == 0:
            logger.warning("push_unique matched no document", extra={"document_id": str(document_id)})

    async def pull_all(self, document_id: UUID, path: str, tag: str) -> None:
        result = await self._collection.update_one(
            {"_id": str(document_id)},
            {"$pull": {path: tag}},
        )
        if result.matched_count == 0:
            logger.warning("pull_all matched no document", extra={"document_id": str(document_id)})

    async def find(self, query: TagQuery, *, limit: int | None = None) -> Sequence[ModelT]:
        cursor = self._collection.find(to_mongo_filter(query))
        if self._order_by:
            cursor = cursor.sort(self._order_by, 1)
        if limit is not None:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(length=None)
        return [self._doc_to_model(d) for d in docs]

    async def clear(self) -> None:
        await self._collection.delete_many({})

    @staticmethod
    def _model_to_doc(document: ModelT) -> dict[str, Any]:
        data = document.model_dump(mode="json")
        data["_id"] = data.pop("id")
        return data

    def _doc_to_model(self, doc: dict[str, Any]) -> ModelT:
        data = dict(doc)
        data["id"] = data.pop("_id")
        return self.model.model_validate(data)
