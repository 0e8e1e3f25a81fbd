"""
Password hashing (passlib/bcrypt), JWT issue/verify (PyJWT) and the
admin-only route dependency.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import Forbidden, Unauthorized
from app.db.session import get_db
from app.models.admin import Admin, ADMIN_ROLES

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "iat": datetime.now(timezone.utc)})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Your token has expired! Please log in again.")
    except jwt.PyJWTError:
        raise Unauthorized("Invalid token. Please log in again!")


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Admin:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("You are not logged in! Please log in to get access.")

    payload = decode_access_token(credentials.credentials)
    try:
        admin_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token. Please log in again!")

    admin = await db.get(Admin, admin_id)
    if admin is None:
        raise Unauthorized("The account belonging to this token no longer exists.")
    if not admin.is_active:
        raise Unauthorized("Your account has been deactivated.")
    return admin


async def require_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if admin.role not in ADMIN_ROLES:
        raise Forbidden()
    return admin
