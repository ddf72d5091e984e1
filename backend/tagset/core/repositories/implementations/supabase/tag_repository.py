from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tagset.core.repositories.tag_repository import ModelT, TagRepository
from tagset.core.schemas.tag_query import ContainsNone, ContainsTag
from tagset.utils.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from uuid import UUID

    from supabase import Client

    from tagset.core.schemas.tag_query import TagQuery


class SupabaseTagRepository(TagRepository[ModelT]):
    """Supabase implementation of the TagRepository.

    Uses Supabase's PostgREST client for reads and inserts. Assumes a table
    whose columns match the model fields, with the tag field stored as
    `text[]`. Atomic array updates go through the `tagset_push_unique` and
    `tagset_pull_all` RPCs (see supabase/migrations).
    """

    PUSH_UNIQUE_RPC = "tagset_push_unique"
    PULL_ALL_RPC = "tagset_pull_all"

    def __init__(
        self,
        model: type[ModelT],
        client: Client,
        table: str,
        *,
        order_by: str | None = None,
    ) -> None:
        self.model = model
        self._client: Client = client
        self._table = table
        self._order_by = order_by

    async def insert(self, document: ModelT) -> ModelT:
        row = self._model_to_row(document)
        resp = await self._run(
            lambda: self._client.table(self._table)
            .insert(row)
            .execute()
        )
        data = self._first(resp.data)
        return self._row_to_model(data)

    async def get(self, document_id: UUID) -> ModelT | None:
        resp = await self._run(
            lambda: self._client.table(self._table)
            .select("*")
            .eq("id", str(document_id))
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_model(items[0])

    async def push_unique(self, document_id: UUID, path: str, tag: str) -> None:
        await self._update_array(self.PUSH_UNIQUE_RPC, document_id, path, tag)

    async def pull_all(self, document_id: UUID, path: str, tag: str) -> None:
        await self._update_array(self.PULL_ALL_RPC, document_id, path, tag)

    async def find(self, query: TagQuery, *, limit: int | None = None) -> Sequence[ModelT]:
        def _query():
            q = self._client.table(self._table).select("*")
            for key, value in query.criteria.items():
                if value is None:
                    q = q.is_(key, "null")
                else:
                    q = q.eq(key, str(value))
            for condition in query.conditions:
                if isinstance(condition, ContainsTag):
                    q = q.contains(condition.path, [condition.tag])
                elif isinstance(condition, ContainsNone):
                    q = q.or_(self._contains_none_filter(condition))
            if self._order_by:
                q = q.order(self._order_by)
            if limit is not None:
                q = q.limit(limit)
            return q.execute()

        resp = await self._run(_query)
        rows: list[dict[str, Any]] = resp.data or []
        return [self._row_to_model(r) for r in rows]

    async def clear(self) -> None:
        # PostgREST refuses unfiltered deletes
        await self._run(
            lambda: self._client.table(self._table)
            .delete()
            .not_.is_("id", "null")
            .execute()
        )

    async def _update_array(self, rpc: str, document_id: UUID, path: str, tag: str) -> None:
        def _rpc():
            params: dict[str, Any] = {
                "p_table": self._table,
                "p_id": str(document_id),
                "p_path": path,
                "p_tag": tag,
            }
            return self._client.rpc(rpc, params=params).execute()

        resp = await self._run(_rpc)
        if resp.data is False:
            logger.warning(f"{rpc} matched no document", extra={"document_id": str(document_id)})

    @staticmethod
    def _contains_none_filter(condition: ContainsNone) -> str:
        # NOT (NULL && array) is NULL, so a NULL column must be matched explicitly
        tags = ",".join(condition.tags)
        return f"{condition.path}.is.null,{condition.path}.not.ov.{{{tags}}}"

    @staticmethod
    async def _run(func: Callable[[], Any]) -> Any:
        import asyncio
        return await asyncio.to_thread(func)

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    def _row_to_model(self, row: dict[str, Any]) -> ModelT:
        normalized = dict(row)
        path = self.model.tag_path()
        # Nullable array columns come back as None
        if normalized.get(path) is None:
            normalized[path] = []
        return self.model.model_validate(normalized)

    def _model_to_row(self, document: ModelT) -> dict[str, Any]:
        # JSON mode stringifies UUIDs and datetimes for PostgREST
        return document.model_dump(mode="json")
