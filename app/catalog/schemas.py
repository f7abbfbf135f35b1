"""
Pydantic schema definitions for the catalog module.

Input models (``BookInput``, ``AuthorInput``) normalise what clients
send before the service looks at it: text is trimmed, missing text
becomes an empty string and ``author_ids`` is coerced to a list of
non-negative integers. Emptiness of required fields is deliberately
*not* checked here; the service reports that as its own validation
error so both transports answer it the same way.

Output models split a book into ``BookSummary`` (list views) and
``BookDetail`` (single-book views). The summary has no
``description`` field at all, so a list response cannot leak it.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_text(v: Any) -> Any:
    if v is None:
        return ""
    if isinstance(v, str):
        return v.strip()
    return v


def _coerce_id(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return abs(v)
    if isinstance(v, float) and v.is_integer():
        return abs(int(v))
    if isinstance(v, str):
        try:
            return abs(int(v.strip()))
        except ValueError:
            return None
    return None


class BookInput(BaseModel):
    """Complete desired state of a book, used for both create and update."""

    title: str = ""
    description: str = ""
    isbn: str = ""
    publication_year: str = ""
    author_ids: List[int] = Field(default_factory=list)

    @field_validator("title", "description", "isbn", "publication_year", mode="before")
    @classmethod
    def _strip(cls, v):
        return _clean_text(v)

    @field_validator("author_ids", mode="before")
    @classmethod
    def _coerce_author_ids(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        ids = [_coerce_id(item) for item in v]
        return [i for i in ids if i is not None]


class AuthorInput(BaseModel):
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _strip(cls, v):
        return _clean_text(v)


class Author(BaseModel):
    id: int
    name: str


class BookSummary(BaseModel):
    """A book as shown in list views.

    ``authors`` holds only the ids that still resolve to an author, in
    stored order. ``author_ids`` is the raw stored list. ``author`` is
    the deprecated free-text author name, returned for older clients.
    """

    id: int
    title: str
    authors: List[Author] = Field(default_factory=list)
    author_ids: List[int] = Field(default_factory=list)
    author: str = ""
    isbn: str = ""
    publication_year: str = ""


class BookDetail(BookSummary):
    description: str = ""


class Confirmation(BaseModel):
    id: int


class BookMutation(BaseModel):
    message: str
    book: BookDetail


class BookDeleted(BaseModel):
    message: str
    id: int


class AuthorCreated(BaseModel):
    message: str
    author: Author
