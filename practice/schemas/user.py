# File: /practice/schemas/user.py | Version: 3.0 | Path: /practice/schemas/user.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr


class UserResponse(BaseModel):
    id: str
    email: EmailStr
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class MeResponse(UserResponse):
    is_active: bool = True
    is_admin: bool = False
    can_see_admin_menu: bool = False
