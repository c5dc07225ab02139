# File: /practice/routers/auth.py | Version: 3.0 | Title: Auth Router (JSON+form tolerant) + Access & Refresh Tokens
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from practice.db.session import get_db
from practice.models.core_entities import User
from practice.schemas.auth import RegisterRequest, TokenResponse
from practice.schemas.user import UserResponse
from practice.security import create_access_token, create_refresh_token, get_password_hash, verify_password

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# ---------------------------
# Utilities
# ---------------------------


async def _read_json_or_form(request: Request) -> Dict[str, Any]:
    """Accept JSON or form-encoded bodies; `username` is an alias of `email`."""
    ctype = (request.headers.get("content-type") or "").lower()
    data: Dict[str, Any] = {}
    if "application/json" in ctype:
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        if isinstance(body, dict):
            data = body
    else:
        form = await request.form()
        data = dict(form)

    if "username" in data and "email" not in data:
        data["email"] = data["username"]
    return data


def _credentials(payload: Dict[str, Any]) -> tuple[str, str]:
    email = (payload.get("email") or "").strip().lower()
    password = payload.get("password")
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Email and password required",
        )
    return email, password


def _authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")
    return user


def _issue_tokens_for_user(user: User) -> TokenResponse:
    sub = {"sub": str(user.id)}
    return TokenResponse(access_token=create_access_token(sub), refresh_token=create_refresh_token(sub))


# ---------------------------
# Endpoints
# ---------------------------


@router.post("/register", response_model=UserResponse)
async def register(request: Request, db: Session = Depends(get_db)):
    """
    Register a user. Idempotent: an existing email returns the existing user.
    Accepts JSON or form {email, password, [first_name], [last_name]}.
    """
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)
    try:
        data = RegisterRequest(
            email=email,
            password=password,
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
        )
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid registration data")

    user = db.query(User).filter(User.email == data.email).first()
    if not user:
        user = User(
            email=data.email,
            first_name=data.first_name,
            last_name=data.last_name,
            hashed_password=get_password_hash(data.password),
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        log.info("registered user %s", user.id)
    return user


@router.post("/login", response_model=TokenResponse)
async def login(request: Request, db: Session = Depends(get_db)):
    """Login with JSON or form {email/username, password}."""
    payload = await _read_json_or_form(request)
    email, password = _credentials(payload)
    return _issue_tokens_for_user(_authenticate(db, email, password))


@router.post("/token", response_model=TokenResponse)
def login_oauth_form(
    db: Session = Depends(get_db),
    username: str = Form(...),
    password: str = Form(...),
):
    """OAuth2 password-form variant used by the interactive docs."""
    return _issue_tokens_for_user(_authenticate(db, (username or "").strip().lower(), password))
