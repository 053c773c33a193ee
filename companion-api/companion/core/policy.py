"""
Authorization policy shared by every mutating route.

authorize() is a pure decision function over (principal, action, owner);
enforce() turns a denial into a generic 403.
"""
import uuid
from dataclasses import dataclass
from enum import Enum

from fastapi import HTTPException

from companion.models.user import User


class Action(str, Enum):
    CREATE_BUILD = "build:create"
    UPDATE_BUILD = "build:update"
    DELETE_BUILD = "build:delete"
    LIKE_BUILD = "build:like"
    COMMENT_BUILD = "build:comment"
    CREATE_ITEM = "item:create"
    UPDATE_ITEM = "item:update"
    RATE_ITEM = "item:rate"
    UPDATE_OWN_PROFILE = "profile:update"
    REFRESH_KNOWLEDGE = "knowledge:refresh"


# Open to any authenticated principal, guests included
_GUEST_ALLOWED = {Action.LIKE_BUILD, Action.RATE_ITEM, Action.UPDATE_OWN_PROFILE}
_ADMIN_ONLY = {Action.CREATE_ITEM, Action.UPDATE_ITEM, Action.REFRESH_KNOWLEDGE}
_OWNER_OR_ADMIN = {Action.UPDATE_BUILD, Action.DELETE_BUILD}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""


ALLOW = Decision(True)


def authorize(principal: User, action: Action, owner_id: uuid.UUID | None = None) -> Decision:
    if principal.is_admin:
        return ALLOW

    if action in _ADMIN_ONLY:
        return Decision(False, "Admin access required")

    if principal.is_guest and action not in _GUEST_ALLOWED:
        return Decision(False, "Guests have read-only access")

    if action in _OWNER_OR_ADMIN and owner_id != principal.id:
        return Decision(False, "Not authorized")

    return ALLOW


def enforce(principal: User, action: Action, owner_id: uuid.UUID | None = None) -> None:
    decision = authorize(principal, action, owner_id)
    if not decision.allowed:
        raise HTTPException(status_code=403, detail=decision.reason)
