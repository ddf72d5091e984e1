from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, TypeVar, overload

from pydantic import Field, create_model

from tagset.config import settings
from tagset.core.models.base import Document
from tagset.core.schemas.tag_query import TagQuery, filter_by_tags

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


class _TagsMarker:
    """Annotated metadata marking a field as the document's tag array."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Tags"


TAGS_MARKER = _TagsMarker()

# Usage on a Taggable model: `labels: Tags = Field(default_factory=list)`
Tags = Annotated[list[str], TAGS_MARKER]


def _declared_tag_path(cls: type[Document]) -> str | None:
    for name, field in cls.model_fields.items():
        if TAGS_MARKER in field.metadata:
            return name
    return None


class Taggable(Document):
    """Document mixin holding an ordered list of string tags.

    The tag field is whichever field is annotated with `Tags`. Mutations here
    are local only; `TagService` persists them atomically.
    """

    @classmethod
    def tag_path(cls) -> str:
        """Return the name of the field declared with `Tags`."""
        name = _declared_tag_path(cls)
        if name is None:
            raise TypeError(f"{cls.__name__} declares no Tags field")
        return name

    @classmethod
    def query(cls, **criteria: Any) -> TagQuery:
        return TagQuery.where(**criteria)

    @classmethod
    def filter_by_tags(
        cls,
        query: TagQuery,
        include_tags: Iterable[str] | None = None,
        exclude_tags: Iterable[str] | None = None,
    ) -> TagQuery:
        """Return a copy of `query` restricted on this model's tag field."""
        return filter_by_tags(query, include_tags, exclude_tags, path=cls.tag_path())

    def tag_list(self) -> list[str]:
        return getattr(self, self.tag_path())

    def add_tag(self, tag: str) -> bool:
        """Append `tag` unless already present. Return True if it was added."""
        tags = self.tag_list()
        if tag in tags:
            return False
        tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        """Remove every occurrence of `tag`. Return True if any was present."""
        tags = self.tag_list()
        if tag not in tags:
            return False
        tags[:] = [t for t in tags if t != tag]
        return True

    def has_tag(self, tag: str) -> bool:
        return tag in self.tag_list()


ModelT = TypeVar("ModelT", bound=Document)


@overload
def taggable(model: type[ModelT], *, path: str | None = None) -> type[ModelT]: ...


@overload
def taggable(
    model: None = None, *, path: str | None = None
) -> Callable[[type[ModelT]], type[ModelT]]: ...


def taggable(model=None, *, path=None):
    """Class decorator declaring a tag array field on a pydantic model.

    Usable bare (`@taggable`) or with a field name (`@taggable(path="labels")`).
    Returns a subclass of the decorated model that mixes in `Taggable`, with
    the field defaulting to an empty list. A model carries at most one Tags
    field.
    """

    def decorate(cls):
        field_name = path or settings.default_tag_path
        declared = _declared_tag_path(cls)
        if declared is not None and declared != field_name:
            raise TypeError(
                f"{cls.__name__} already declares Tags field {declared!r}, cannot add {field_name!r}"
            )
        bases = (cls,) if issubclass(cls, Taggable) else (cls, Taggable)
        return create_model(
            cls.__name__,
            __base__=bases,
            __module__=cls.__module__,
            __doc__=cls.__doc__,
            **{field_name: (Tags, Field(default_factory=list, description="Tags for categorization"))},
        )

    if model is not None:
        return decorate(model)
    return decorate
