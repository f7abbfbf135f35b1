"""
Form-action ("AJAX") transport for the catalogue.

Older page scripts post form-encoded requests to a single endpoint and
pick the operation with an ``action`` field. Every request must carry
a ``nonce`` security token, checked before anything is dispatched.

Responses use the envelope those scripts expect::

    {"success": true,  "data": <payload>}
    {"success": false, "data": {"message": "..."}}

Permission failures answer 403, storage failures 500, an invalid token
403 and an unknown action 400. Validation and not-found errors keep
the historic 200 status with ``success: false``.

The action table is filled once by ``register_actions()`` when the
application is built.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData

from ..config import Settings, get_settings
from .errors import CatalogError, Forbidden, RepositoryFailure, ValidationError
from .policy import Actor, get_actor
from .router import get_service
from .schemas import AuthorInput, BookInput
from .service import CatalogService


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ajax", tags=["ajax"])

Handler = Callable[[CatalogService, FormData, Actor], Any]

ACTIONS: Dict[str, Handler] = {}


# ---------------------------------------------------------------------------
# Security token


def create_nonce(action: Optional[str] = None, secret: Optional[str] = None) -> str:
    settings = get_settings()
    key = (secret if secret is not None else settings.nonce_secret).encode("utf-8")
    message = (action or settings.nonce_action).encode("utf-8")
    return hmac.new(key, message, hashlib.sha256).hexdigest()


def verify_nonce(token: Optional[str], action: Optional[str] = None, secret: Optional[str] = None) -> bool:
    if not token or not isinstance(token, str):
        return False
    return hmac.compare_digest(token, create_nonce(action, secret))


# ---------------------------------------------------------------------------
# Form parsing


def _author_ids(form: FormData) -> List[str]:
    # PHP-style forms repeat ``author_ids[]``; plain forms repeat ``author_ids``.
    return list(form.getlist("author_ids[]")) + list(form.getlist("author_ids"))


def _book_input(form: FormData) -> BookInput:
    return BookInput(
        title=form.get("title"),
        description=form.get("description"),
        isbn=form.get("isbn"),
        publication_year=form.get("publication_year"),
        author_ids=_author_ids(form),
    )


def _text_field(form: FormData, name: str) -> str:
    # File uploads come back as UploadFile, never as text.
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def _book_id(form: FormData) -> int:
    raw = _text_field(form, "id")
    try:
        book_id = abs(int(raw))
    except ValueError:
        book_id = 0
    if not book_id:
        raise ValidationError("Invalid book ID")
    return book_id


# ---------------------------------------------------------------------------
# Actions


def _get_books(service: CatalogService, form: FormData, actor: Actor):
    return [book.model_dump() for book in service.list_books()]


def _create_book(service: CatalogService, form: FormData, actor: Actor):
    book = service.create_book(_book_input(form), actor)
    return {"message": "Book created successfully", "book": book.model_dump()}


def _update_book(service: CatalogService, form: FormData, actor: Actor):
    if not service.policy.can_edit(actor):
        raise Forbidden("Not allowed")
    book = service.update_book(_book_id(form), _book_input(form), actor)
    return {"message": "Book updated successfully", "book": book.model_dump()}


def _delete_book(service: CatalogService, form: FormData, actor: Actor):
    if not service.policy.can_delete(actor):
        raise Forbidden("Not allowed")
    confirmation = service.delete_book(_book_id(form), actor)
    return {"message": "Book deleted successfully", "id": confirmation.id}


def _get_authors(service: CatalogService, form: FormData, actor: Actor):
    return [author.model_dump() for author in service.list_authors()]


def _create_author(service: CatalogService, form: FormData, actor: Actor):
    author = service.create_author(AuthorInput(name=form.get("author_name")), actor)
    return {"message": "Author created successfully", "author": author.model_dump()}


def register_actions() -> Dict[str, Handler]:
    """Build the action table. Safe to call more than once."""
    ACTIONS.clear()
    ACTIONS.update(
        {
            "get_books": _get_books,
            "create_book": _create_book,
            "update_book": _update_book,
            "delete_book": _delete_book,
            "get_authors": _get_authors,
            "create_author": _create_author,
        }
    )
    return ACTIONS


# ---------------------------------------------------------------------------
# Endpoint


def _settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _error(message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": {"message": message}},
    )


@router.get("/nonce")
def get_nonce(request: Request):
    """Token for page scripts to send back with every action."""
    settings = _settings(request)
    return {"nonce": create_nonce(settings.nonce_action, settings.nonce_secret)}


@router.post("")
async def dispatch(
    request: Request,
    actor: Actor = Depends(get_actor),
    service: CatalogService = Depends(get_service),
):
    form = await request.form()
    settings = _settings(request)
    if not verify_nonce(form.get("nonce"), settings.nonce_action, settings.nonce_secret):
        logger.warning("Rejected form action with invalid security token")
        return _error("Invalid security token", 403)

    action = _text_field(form, "action")
    handler = ACTIONS.get(action)
    if handler is None:
        return _error("Unknown action", 400)

    try:
        payload = handler(service, form, actor)
    except Forbidden as exc:
        return _error(exc.message, 403)
    except RepositoryFailure as exc:
        return _error(exc.message, 500)
    except CatalogError as exc:
        return _error(exc.message)
    except PydanticValidationError:
        return _error("Invalid form data")
    return {"success": True, "data": payload}
