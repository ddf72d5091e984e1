from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator
from pydantic_core import to_jsonable_python

from tagset.config import settings
from tagset.core.models.base import AppBaseModel

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class ContainsTag(AppBaseModel):
    """Documents whose tag field contains `tag`."""

    model_config = ConfigDict(frozen=True)

    op: Literal["contains"] = "contains"
    path: str
    tag: str

    def matches(self, row: Mapping[str, Any]) -> bool:
        return self.tag in (row.get(self.path) or ())


class ContainsNone(AppBaseModel):
    """Documents whose tag field contains none of `tags`."""

    model_config = ConfigDict(frozen=True)

    op: Literal["contains_none"] = "contains_none"
    path: str
    tags: tuple[str, ...]

    def matches(self, row: Mapping[str, Any]) -> bool:
        values = row.get(self.path) or ()
        return not any(tag in values for tag in self.tags)


TagCondition = Annotated[ContainsTag | ContainsNone, Field(discriminator="op")]


class TagQuery(AppBaseModel):
    """Immutable query predicate: field equality criteria plus tag conditions.

    Every criterion and every condition must hold (conjunction). Stores either
    evaluate `matches` directly or translate the conditions into their own
    filter language.
    """

    model_config = ConfigDict(frozen=True)

    criteria: dict[str, Any] = Field(default_factory=dict)
    conditions: tuple[TagCondition, ...] = ()

    @field_validator("criteria")
    @classmethod
    def normalize_criteria(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Store criteria in JSON form (UUIDs and datetimes as strings), as rows are stored."""
        return {key: to_jsonable_python(value) for key, value in v.items()}

    @classmethod
    def where(cls, **criteria: Any) -> TagQuery:
        return cls(criteria=criteria)

    @classmethod
    def all(cls) -> TagQuery:
        return cls()

    def matches(self, row: Mapping[str, Any]) -> bool:
        if any(row.get(key) != value for key, value in self.criteria.items()):
            return False
        return all(condition.matches(row) for condition in self.conditions)


def filter_by_tags(
    query: TagQuery,
    include_tags: Iterable[str] | None = None,
    exclude_tags: Iterable[str] | None = None,
    *,
    path: str | None = None,
) -> TagQuery:
    """Return a new query restricted to documents carrying tags.

    Each include tag adds its own "contains" condition, so a document must
    carry all of them. The exclude tags form a single "contains none of"
    condition. `None` or empty lists add nothing, and a tag listed on both
    sides simply matches no document. `query` itself is left untouched.
    """
    path = path or settings.default_tag_path
    conditions = list(query.conditions)
    for tag in include_tags or ():
        conditions.append(ContainsTag(path=path, tag=tag))
    excluded = tuple(exclude_tags or ())
    if excluded:
        conditions.append(ContainsNone(path=path, tags=excluded))
    return query.model_copy(
        update={"criteria": dict(query.criteria), "conditions": tuple(conditions)}
    )
