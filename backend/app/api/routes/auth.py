"""
Authentication endpoints: admin login and identity.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import require_admin
from app.db.session import get_db
from app.models.admin import Admin
from app.schemas.admin import AdminLogin, AdminResponse, Token
from app.services.auth_service import authenticate_admin

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
async def login(login_data: AdminLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_admin(db, login_data)
    return Token(access_token=token)


@router.get("/me", response_model=AdminResponse)
async def me(admin: Admin = Depends(require_admin)):
    return admin
