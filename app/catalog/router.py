"""
Route definitions for the catalogue REST API.

Endpoints under /api/catalog:
- GET    /books          : list books (no description)
- GET    /books/{book_id}: one book with description
- POST   /books          : create a book        (create permission)
- PUT    /books/{book_id}: replace a book       (edit permission)
- DELETE /books/{book_id}: delete a book        (delete permission)
- GET    /authors        : list authors by name
- GET    /authors/{id}   : one author
- POST   /authors        : create an author     (create permission)
"""

from __future__ import annotations

from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request

from .errors import CatalogError, Forbidden
from .policy import Actor, get_actor
from .schemas import (
    Author,
    AuthorCreated,
    AuthorInput,
    BookDeleted,
    BookDetail,
    BookInput,
    BookMutation,
    BookSummary,
)
from .service import CatalogService


router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_service(request: Request) -> CatalogService:
    return request.app.state.catalog


def _raise_http(exc: CatalogError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.message)


def _require(allowed: bool) -> None:
    # Mirrors the service check so a refused call never reaches it.
    if not allowed:
        _raise_http(Forbidden("Not allowed"))


@router.get("/books", response_model=List[BookSummary])
def list_books(service: CatalogService = Depends(get_service)) -> List[BookSummary]:
    try:
        return service.list_books()
    except CatalogError as exc:
        _raise_http(exc)


@router.get("/books/{book_id}", response_model=BookDetail)
def get_book(book_id: int, service: CatalogService = Depends(get_service)) -> BookDetail:
    try:
        return service.get_book(book_id)
    except CatalogError as exc:
        _raise_http(exc)


@router.post("/books", response_model=BookMutation, status_code=201)
def create_book(
    payload: BookInput,
    actor: Actor = Depends(get_actor),
    service: CatalogService = Depends(get_service),
) -> BookMutation:
    _require(service.policy.can_create(actor))
    try:
        book = service.create_book(payload, actor)
    except CatalogError as exc:
        _raise_http(exc)
    return BookMutation(message="Book created successfully", book=book)


@router.put("/books/{book_id}", response_model=BookMutation)
def update_book(
    book_id: int,
    payload: BookInput,
    actor: Actor = Depends(get_actor),
    service: CatalogService = Depends(get_service),
) -> BookMutation:
    _require(service.policy.can_edit(actor))
    try:
        book = service.update_book(book_id, payload, actor)
    except CatalogError as exc:
        _raise_http(exc)
    return BookMutation(message="Book updated successfully", book=book)


@router.delete("/books/{book_id}", response_model=BookDeleted)
def delete_book(
    book_id: int,
    actor: Actor = Depends(get_actor),
    service: CatalogService = Depends(get_service),
) -> BookDeleted:
    _require(service.policy.can_delete(actor))
    try:
        confirmation = service.delete_book(book_id, actor)
    except CatalogError as exc:
        _raise_http(exc)
    return BookDeleted(message="Book deleted successfully", id=confirmation.id)


@router.get("/authors", response_model=List[Author])
def list_authors(service: CatalogService = Depends(get_service)) -> List[Author]:
    try:
        return service.list_authors()
    except CatalogError as exc:
        _raise_http(exc)


@router.get("/authors/{author_id}", response_model=Author)
def get_author(author_id: int, service: CatalogService = Depends(get_service)) -> Author:
    try:
        return service.get_author(author_id)
    except CatalogError as exc:
        _raise_http(exc)


@router.post("/authors", response_model=AuthorCreated, status_code=201)
def create_author(
    payload: AuthorInput,
    actor: Actor = Depends(get_actor),
    service: CatalogService = Depends(get_service),
) -> AuthorCreated:
    _require(service.policy.can_create(actor))
    try:
        author = service.create_author(payload, actor)
    except CatalogError as exc:
        _raise_http(exc)
    return AuthorCreated(message="Author created successfully", author=author)
