# File: /practice/security.py | Version: 2.0 | Title: JWT Security (access + refresh) - OAuth2 tokenUrl=/auth/token
from datetime import UTC, datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from practice.core.config import settings
from practice.db.session import get_db
from practice.models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def _jwt_encode(claims: dict) -> str:
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _jwt_decode(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def _token(data: dict, token_type: str, minutes: int) -> str:
    claims = data.copy()
    claims.update({"exp": datetime.now(UTC) + timedelta(minutes=minutes), "type": token_type})
    return _jwt_encode(claims)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    minutes = (
        int(expires_delta.total_seconds() // 60)
        if expires_delta is not None
        else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return _token(data, "access", minutes)


def create_refresh_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    return _token(data, "refresh", expires_minutes or settings.REFRESH_TOKEN_EXPIRE_MINUTES)


def decode_refresh_token(token: str) -> dict:
    try:
        payload = _jwt_decode(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="Could not validate credentials")
    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid token type")
    return payload


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = _jwt_decode(token)
    except JWTError:
        raise credentials_exception
    if payload.get("type") not in (None, "access"):
        raise credentials_exception
    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise credentials_exception
    return user
