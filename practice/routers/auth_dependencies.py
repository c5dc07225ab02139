# File: practice/routers/auth_dependencies.py | Version: 2.0 | Path: /practice/routers/auth_dependencies.py
from fastapi import Depends

from practice.core.permissions import Role, require_role
from practice.security import get_current_user


def get_me(current_user=Depends(get_current_user)):
    """Authenticated user; routers depend on this rather than on security directly."""
    return current_user


def get_manager(current_user=Depends(get_current_user)):
    """Authenticated user with at least the Manager role (403 otherwise)."""
    require_role(current_user, minimum=Role.MANAGER, message="Managers and admins only")
    return current_user
