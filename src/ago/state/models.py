"""Data models for the persisted document collection."""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class AgoStateModel(BaseModel):
    """Shared configuration for persisted models.

    Field aliases carry the on-disk key names while attributes stay snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)


class DocumentRecord(AgoStateModel):
    """A registered document.

    Attributes:
        name: Base name of the original file.
        id: Unique, never reused document identifier.
    """

    name: str = Field(alias="Name")
    id: int = Field(alias="Id", ge=0)


class DocumentsInfo(AgoStateModel):
    """The full document collection and its id counter.

    Attributes:
        docs: Records in insertion order.
        next_id: Identifier handed to the next added document.
    """

    docs: List[DocumentRecord] = Field(default_factory=list, alias="Docs")
    next_id: int = Field(default=0, alias="Next_id", ge=0)

    @field_validator("docs", mode="before")
    @classmethod
    def _null_docs_as_empty(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @model_validator(mode="after")
    def _check_ids(self) -> "DocumentsInfo":
        seen: set[int] = set()
        for doc in self.docs:
            if doc.id in seen:
                raise ValueError(f"duplicate document id {doc.id}")
            seen.add(doc.id)
            if doc.id >= self.next_id:
                raise ValueError(
                    f"Next_id {self.next_id} must be greater than every document id "
                    f"(found {doc.id})"
                )
        return self


__all__ = ["DocumentRecord", "DocumentsInfo"]
