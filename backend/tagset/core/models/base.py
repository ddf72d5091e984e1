from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field


class AppBaseModel(PydanticBaseModel):
    """Base model for all library models."""

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
    )


class Document(AppBaseModel):
    """Base model for stored documents, keyed by `id`."""

    id: UUID = Field(default_factory=uuid4, description="Unique document identifier")
