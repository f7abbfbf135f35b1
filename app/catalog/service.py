"""
Catalogue service: the rules between the transports and storage.

The service is stateless. It validates input, checks the access
policy before any mutation, resolves the author ids stored on a book
into author objects and shapes books into list or detail views. All
persistence goes through a ``Repository``.

Expected outcomes (bad input, unknown ids, missing permission) are
raised as the typed errors in ``errors``. Anything else escaping the
repository is logged and re-raised as ``RepositoryFailure``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..models import AuthorRecord, BookRecord
from ..storage import Repository
from .errors import CatalogError, Forbidden, NotFound, RepositoryFailure, ValidationError
from .policy import AccessPolicy, Actor
from .schemas import Author, AuthorInput, BookDetail, BookInput, BookSummary, Confirmation


logger = logging.getLogger(__name__)


def resolve_description(book: BookRecord) -> str:
    """Rich description if set, else the legacy content body, else ``""``."""
    if book.description:
        return book.description
    if book.content:
        return book.content
    return ""


@contextmanager
def _repository_call(what: str) -> Iterator[None]:
    try:
        yield
    except CatalogError:
        raise
    except Exception as exc:
        logger.exception("Repository failure while trying to %s", what)
        raise RepositoryFailure(f"Failed to {what}") from exc


class CatalogService:
    def __init__(self, repository: Repository, policy: AccessPolicy) -> None:
        self.repository = repository
        self.policy = policy

    # ------------------------------------------------------------------
    # Books

    def list_books(self) -> List[BookSummary]:
        with _repository_call("list books"):
            books = self.repository.list("book", order_by="created_desc")
            return [BookSummary(**self._project(book)) for book in books]

    def get_book(self, book_id: int) -> BookDetail:
        with _repository_call("get book"):
            book = self._load_book(book_id)
            return self._detail(book)

    def create_book(self, data: BookInput, actor: Optional[Actor]) -> BookDetail:
        self._require(self.policy.can_create, actor, "create book")
        self._validate_book(data)
        with _repository_call("create book"):
            book = self.repository.create("book", self._book_fields(data))
            logger.info("Created book %s (%r)", book.id, book.title)
            return self._detail(book)

    def update_book(self, book_id: int, data: BookInput, actor: Optional[Actor]) -> BookDetail:
        self._require(self.policy.can_edit, actor, "update book")
        with _repository_call("update book"):
            self._load_book(book_id)
            self._validate_book(data)
            try:
                book = self.repository.update(book_id, self._book_fields(data))
            except KeyError:
                raise NotFound("Book not found")
            logger.info("Updated book %s", book_id)
            return self._detail(book)

    def delete_book(self, book_id: int, actor: Optional[Actor]) -> Confirmation:
        self._require(self.policy.can_delete, actor, "delete book")
        with _repository_call("delete book"):
            self._load_book(book_id)
            if not self.repository.delete(book_id):
                raise NotFound("Book not found")
        logger.info("Deleted book %s", book_id)
        return Confirmation(id=book_id)

    # ------------------------------------------------------------------
    # Authors

    def list_authors(self) -> List[Author]:
        with _repository_call("list authors"):
            authors = self.repository.list("author", order_by="name_asc")
            return [Author(id=a.id, name=a.name) for a in authors]

    def get_author(self, author_id: int) -> Author:
        with _repository_call("get author"):
            record = self.repository.get(author_id)
        if not isinstance(record, AuthorRecord):
            raise NotFound("Author not found")
        return Author(id=record.id, name=record.name)

    def create_author(self, data: AuthorInput, actor: Optional[Actor]) -> Author:
        self._require(self.policy.can_create, actor, "create author")
        if not data.name:
            raise ValidationError("name required")
        with _repository_call("create author"):
            record = self.repository.create("author", {"name": data.name})
        logger.info("Created author %s (%r)", record.id, record.name)
        return Author(id=record.id, name=record.name)

    # ------------------------------------------------------------------
    # Helpers

    def _require(self, check, actor: Optional[Actor], what: str) -> None:
        if actor is None or not check(actor):
            logger.warning(
                "Refused to %s for user %s",
                what,
                actor.user_id if actor is not None else None,
            )
            raise Forbidden("Not allowed")

    def _load_book(self, book_id: int) -> BookRecord:
        record = self.repository.get(book_id)
        if not isinstance(record, BookRecord):
            raise NotFound("Book not found")
        return record

    @staticmethod
    def _validate_book(data: BookInput) -> None:
        if not data.title:
            raise ValidationError("title required")

    @staticmethod
    def _book_fields(data: BookInput) -> dict:
        # Full overwrite: every call carries the complete desired state.
        # The legacy content body mirrors the description so the
        # read-time fallback never resurrects stale text.
        return {
            "title": data.title,
            "description": data.description,
            "content": data.description,
            "isbn": data.isbn,
            "publication_year": data.publication_year,
            "author_ids": list(data.author_ids),
        }

    def _resolve_authors(self, author_ids: List[int]) -> List[Author]:
        records = self.repository.get_many(author_ids)
        return [Author(id=r.id, name=r.name) for r in records if isinstance(r, AuthorRecord)]

    def _project(self, book: BookRecord) -> dict:
        return {
            "id": book.id,
            "title": book.title,
            "authors": self._resolve_authors(book.author_ids),
            "author_ids": list(book.author_ids),
            "author": book.legacy_author,
            "isbn": book.isbn,
            "publication_year": book.publication_year,
        }

    def _detail(self, book: BookRecord) -> BookDetail:
        return BookDetail(**self._project(book), description=resolve_description(book))
