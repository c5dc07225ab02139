# File: /practice/routers/auth_extras.py | Version: 2.0 | Title: Auth Extras (/auth/me, /auth/refresh)
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from practice.routers.auth_dependencies import get_me
from practice.schemas.auth import RefreshIn
from practice.schemas.user import MeResponse
from practice.security import create_access_token, decode_refresh_token

router = APIRouter(prefix="/auth", tags=["Auth"])


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.get("/me", response_model=MeResponse)
def me(current_user=Depends(get_me)):
    return current_user


@router.post("/refresh", response_model=TokenOut)
def refresh(body: RefreshIn):
    payload = decode_refresh_token(body.refresh_token)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    return TokenOut(access_token=create_access_token({"sub": sub}))
