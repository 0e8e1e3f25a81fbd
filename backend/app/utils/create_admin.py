"""
Provision an admin account.

Usage:
    python -m app.utils.create_admin admin@academy.com 'S3cret-pass' --name "Head Coach"
"""

import argparse
import asyncio

from app.core.logging import setup_logging, get_logger
from app.db.session import AsyncSessionLocal, engine
from app.services.auth_service import ensure_admin


async def _create(email: str, password: str, name: str, role: str) -> None:
    logger = get_logger(__name__)
    async with AsyncSessionLocal() as session:
        admin = await ensure_admin(session, email, password, name=name, role=role)
        await session.commit()
        logger.info("admin_ready", admin_id=admin.id, email=admin.email)
    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin account if it does not exist")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--role", default="admin", choices=["admin", "super-admin"])
    args = parser.parse_args()

    if len(args.password) < 8:
        parser.error("password must be at least 8 characters")

    setup_logging()
    asyncio.run(_create(args.email, args.password, args.name, args.role))


if __name__ == "__main__":
    main()
