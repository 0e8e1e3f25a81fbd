"""
Authentication service handling admin login and provisioning.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.admin import Admin
from app.schemas.admin import AdminLogin
from app.core.exceptions import Forbidden, Unauthorized
from app.core.security import hash_password, verify_password, create_access_token
from app.core.logging import get_logger

logger = get_logger(__name__)


async def ensure_admin(
    db: AsyncSession,
    email: str,
    password: str,
    name: str = "Administrator",
    role: str = "admin",
) -> Admin:
    """
    Return the admin with this email, creating it if missing.
    An existing account keeps its password.
    """
    email = email.strip().lower()
    result = await db.execute(select(Admin).where(Admin.email == email))
    admin = result.scalar_one_or_none()
    if admin:
        logger.info("admin_exists", admin_id=admin.id, email=email)
        return admin

    admin = Admin(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        role=role,
    )
    db.add(admin)
    await db.flush()
    await db.refresh(admin)

    logger.info("admin_created", admin_id=admin.id, email=email, role=role)
    return admin


async def authenticate_admin(db: AsyncSession, login_data: AdminLogin) -> str:
    """
    Authenticate an admin and return a JWT access token.
    Raises 401 if credentials are invalid, 403 if the account is deactivated.
    """
    email = login_data.email.strip().lower()
    result = await db.execute(select(Admin).where(Admin.email == email))
    admin = result.scalar_one_or_none()

    if not admin or not verify_password(login_data.password, admin.hashed_password):
        logger.warning("login_failed", email=email)
        raise Unauthorized("Invalid email or password")

    if not admin.is_active:
        raise Forbidden("Account is deactivated")

    token = create_access_token(data={"sub": str(admin.id), "role": admin.role})
    logger.info("admin_logged_in", admin_id=admin.id)
    return token
