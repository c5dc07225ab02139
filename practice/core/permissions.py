# File: /practice/core/permissions.py | Version: 2.0
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, status

from practice.security import get_current_user


class Role(str, Enum):
    STAFF = "Staff"
    MANAGER = "Manager"
    ADMIN = "Admin"


# Lowest → Highest
ROLE_ORDER = [Role.STAFF, Role.MANAGER, Role.ADMIN]
ROLE_RANK = {r: i for i, r in enumerate(ROLE_ORDER)}


def get_user_role(user: Any) -> Optional[Role]:
    """
    Resolve a user's Role from its flags. Inactive or missing users have no role.
    `can_see_admin_menu` is the manager flag.
    """
    if user is None or not getattr(user, "is_active", True):
        return None
    if getattr(user, "is_admin", False):
        return Role.ADMIN
    if getattr(user, "can_see_admin_menu", False):
        return Role.MANAGER
    return Role.STAFF


def has_min_role(user: Any, minimum: Role) -> bool:
    current = get_user_role(user)
    if current is None:
        return False
    return ROLE_RANK[current] >= ROLE_RANK[minimum]


def is_manager_or_admin(user: Any) -> bool:
    return has_min_role(user, Role.MANAGER)


def require_role(user: Any, *, minimum: Role, message: Optional[str] = None) -> Role:
    """
    Enforce that the user has at least `minimum` role. Raises 403 if not.
    Returns the resolved Role on success.
    """
    resolved = get_user_role(user)
    if resolved is None or ROLE_RANK[resolved] < ROLE_RANK[minimum]:
        detail = message or f"Requires role '{minimum.value}' or higher."
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
    return resolved


# ----- FastAPI dependency factory -----
def require_role_dependency(minimum: Role) -> Callable:
    """
    Example:
      @router.get("/api/users", dependencies=[Depends(require_role_dependency(Role.MANAGER))])
    """

    def _dep(current_user=Depends(get_current_user)) -> None:
        require_role(current_user, minimum=minimum)

    return _dep
