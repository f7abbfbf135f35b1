"""
Access policy for catalogue mutations.

Reads are public. Creating, editing and deleting are gated on role
capabilities modelled after WordPress: ``edit_posts`` for create and
edit, ``delete_posts`` for delete. How a user proved who they are is
outside this module; it only sees the resulting ``Actor``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Optional

from fastapi import Header
from pydantic import BaseModel


ROLE_CAPABILITIES: Dict[str, FrozenSet[str]] = {
    "administrator": frozenset({"read", "edit_posts", "delete_posts"}),
    "editor": frozenset({"read", "edit_posts", "delete_posts"}),
    "author": frozenset({"read", "edit_posts"}),
    "contributor": frozenset({"read", "edit_posts"}),
    "subscriber": frozenset({"read"}),
}


class Actor(BaseModel):
    """The caller of a catalogue operation. ``user_id`` 0 means anonymous."""

    user_id: int = 0
    role: str = ""

    @property
    def capabilities(self) -> FrozenSet[str]:
        return ROLE_CAPABILITIES.get(self.role.strip().lower(), frozenset())


ANONYMOUS = Actor()


class AccessPolicy(ABC):
    """Yes/no capability checks consulted before every mutation."""

    @abstractmethod
    def is_authenticated(self, actor: Optional[Actor]) -> bool:
        ...

    @abstractmethod
    def can_create(self, actor: Optional[Actor]) -> bool:
        ...

    @abstractmethod
    def can_edit(self, actor: Optional[Actor]) -> bool:
        ...

    @abstractmethod
    def can_delete(self, actor: Optional[Actor]) -> bool:
        ...


class CapabilityPolicy(AccessPolicy):
    def is_authenticated(self, actor: Optional[Actor]) -> bool:
        return actor is not None and actor.user_id > 0

    def _has(self, actor: Optional[Actor], capability: str) -> bool:
        return self.is_authenticated(actor) and capability in actor.capabilities

    def can_create(self, actor: Optional[Actor]) -> bool:
        return self._has(actor, "edit_posts")

    def can_edit(self, actor: Optional[Actor]) -> bool:
        return self._has(actor, "edit_posts")

    def can_delete(self, actor: Optional[Actor]) -> bool:
        return self._has(actor, "delete_posts")


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Actor:
    """Resolve the calling actor from request headers.

    Missing or malformed user ids yield the anonymous actor rather than
    an error; reads do not need an identity and mutations are refused
    later by the policy.
    """
    try:
        user_id = int((x_user_id or "").strip())
    except ValueError:
        return ANONYMOUS
    if user_id <= 0:
        return ANONYMOUS
    return Actor(user_id=user_id, role=(x_user_role or "").strip())
