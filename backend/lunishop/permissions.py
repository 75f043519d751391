"""
Role ranks and permission checks.

Roles form a total order. A permission check compares two ranks and
nothing else, so every check here is a pure function that can be tested
without a request.

    anonymous(0) < user(1) < seller(2) < accountant(3) < admin(4)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import ForbiddenError, UnauthenticatedError


# =============================================================================
# ROLES
# =============================================================================

class Role(str, Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    SELLER = "seller"
    ACCOUNTANT = "accountant"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return ROLE_RANKS[self]

    @classmethod
    def parse(cls, value) -> "Role":
        """Unknown or missing role names resolve to anonymous."""
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.ANONYMOUS


ROLE_RANKS = {
    Role.ANONYMOUS: 0,
    Role.USER: 1,
    Role.SELLER: 2,
    Role.ACCOUNTANT: 3,
    Role.ADMIN: 4,
}


def has_permission(actual: Role | str, required: Role | str) -> bool:
    return Role.parse(actual).rank >= Role.parse(required).rank


# =============================================================================
# REQUEST IDENTITY
# =============================================================================

@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller of one request.

    Resolved once by the auth decorators and then passed explicitly to
    whatever needs it.
    """
    user_id: int | None
    email: str | None
    role: Role

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls(user_id=None, email=None, role=Role.ANONYMOUS)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


# =============================================================================
# CHECKS
# =============================================================================

def check_role(identity: Identity, required: Role) -> None:
    """Raise unless the identity ranks at least as high as required."""
    if not identity.is_authenticated:
        raise UnauthenticatedError("Authentication required")
    if not has_permission(identity.role, required):
        raise ForbiddenError("Insufficient permissions")


def check_any_role(identity: Identity, *roles: Role) -> None:
    """Raise unless the identity holds exactly one of the given roles."""
    if not identity.is_authenticated:
        raise UnauthenticatedError("Authentication required")
    if identity.role not in roles:
        raise ForbiddenError("Insufficient permissions")


def is_owner_or_any_role(identity: Identity, owner_id: int | None, *roles: Role) -> bool:
    if not identity.is_authenticated:
        return False
    return identity.user_id == owner_id or identity.role in roles


def check_owner_or_any_role(identity: Identity, owner_id: int | None, *roles: Role) -> None:
    if not identity.is_authenticated:
        raise UnauthenticatedError("Authentication required")
    if not is_owner_or_any_role(identity, owner_id, *roles):
        raise ForbiddenError("Insufficient permissions")


# Roles that may act on any customer's orders
STAFF_ROLES = (Role.SELLER, Role.ADMIN)
