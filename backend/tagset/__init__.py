from .core.models.base import Document
from .core.models.taggable import Taggable, Tags, taggable
from .core.repositories.tag_repository import TagRepository
from .core.schemas.tag_query import ContainsNone, ContainsTag, TagQuery, filter_by_tags
from .core.services.tag_service import TagService

__all__ = [
    "ContainsNone",
    "ContainsTag",
    "Document",
    "TagQuery",
    "TagRepository",
    "TagService",
    "Taggable",
    "Tags",
    "filter_by_tags",
    "taggable",
]
