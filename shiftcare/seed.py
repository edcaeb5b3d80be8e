"""초기 데이터 시드 스크립트 — 관리자 계정 생성.

Seed script — Creates the tables and the bootstrap admin account.
Run this script once to bootstrap a fresh database.

Usage:
    python -m shiftcare.seed

Creates:
    - 1개 관리자 계정: SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD (1 admin user)
"""

import asyncio
import logging

from shiftcare.config import settings
from shiftcare.database import Database
from shiftcare.models import User, UserRole
from shiftcare.repositories.user_repository import user_repository
from shiftcare.utils.logger import setup_logging
from shiftcare.utils.password import hash_password

logger = logging.getLogger(__name__)


async def seed(database: Database) -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create tables if they don't exist, then insert the admin user.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if the admin already exists).
    """
    await database.create_all()

    async with database.session_factory() as db:
        existing: User | None = await user_repository.get_by_email(db, settings.SEED_ADMIN_EMAIL)
        if existing is not None:
            logger.info("Already seeded (admin %s exists). Skipping.", existing.email)
            return

        admin: User = User(
            email=settings.SEED_ADMIN_EMAIL.lower(),
            first_name="System",
            last_name="Admin",
            password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_admitted=True,
        )
        db.add(admin)
        await db.commit()
        logger.info("Seeded admin user %s", admin.email)


async def main() -> None:
    setup_logging(settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    database.init()
    try:
        await seed(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
