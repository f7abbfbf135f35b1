# app/models.py
from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field, field_validator
from typing_extensions import Literal


RecordKind = Literal["book", "author"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AuthorRecord(BaseModel):
    id: int
    kind: Literal["author"] = "author"
    name: str
    created: datetime = Field(default_factory=_now)


class BookRecord(BaseModel):
    """A stored book.

    ``description`` is the rich description field, ``content`` the legacy
    content body it falls back to. ``legacy_author`` is the deprecated
    single-name author field; nothing writes it except imports.
    ``author_ids`` is kept exactly as written, duplicates included.
    """

    id: int
    kind: Literal["book"] = "book"
    title: str
    description: str = ""
    content: str = ""
    isbn: str = ""
    publication_year: str = ""
    author_ids: List[int] = Field(default_factory=list)
    legacy_author: str = ""
    created: datetime = Field(default_factory=_now)

    @field_validator("author_ids", mode="before")
    @classmethod
    def _wrap_scalar_author_ids(cls, v):
        # Older records stored a single id instead of a list.
        if v is None:
            return []
        if isinstance(v, (list, tuple)):
            return list(v)
        return [v] if v else []
