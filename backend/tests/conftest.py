"""
Shared pytest fixtures for tagset tests.

Services run against the in-memory repository so the persisted scenarios
need no database.
"""

import pytest

from tagset import Document, TagService, taggable
from tagset.core.repositories.implementations.memory.tag_repository import InMemoryTagRepository


@taggable(path="labels")
class Item(Document):
    title: str | None = None


FILTER_FIXTURES = [
    {"title": "A", "labels": ["a", "b"]},
    {"title": "B", "labels": []},
    {"title": "C", "labels": ["c", "b"]},
    {"title": "D", "labels": ["a", "c"]},
    {"title": "E", "labels": ["b"]},
    {"title": "F", "labels": ["a", "b", "c"]},
]


@pytest.fixture
def item_model() -> type[Item]:
    return Item


@pytest.fixture
def repo() -> InMemoryTagRepository:
    return InMemoryTagRepository(Item)


@pytest.fixture
def service(repo) -> TagService:
    return TagService(repo)


@pytest.fixture
async def loaded_service(service, repo) -> TagService:
    """Service whose store holds the six A-F filter fixtures, in order."""
    await repo.clear()
    for data in FILTER_FIXTURES:
        await service.save(Item(**data))
    return service
