"""Capability checks for mutating operations."""

from duoledger.domain.entities import ActorContext
from duoledger.domain.errors import PermissionDeniedError, permission_denied


def can_edit(actor: ActorContext) -> bool:
    return actor.is_admin


def can_delete(actor: ActorContext) -> bool:
    return actor.is_admin


def can_import(actor: ActorContext) -> bool:
    return actor.is_admin


def require(allowed: bool, actor: ActorContext, action: str) -> None:
    """Raise PermissionDeniedError unless ``allowed``."""
    if not allowed:
        raise PermissionDeniedError(permission_denied(actor.name, action))
