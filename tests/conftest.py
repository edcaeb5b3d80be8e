"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Temporary SQLite (aiosqlite) DB, session, and httpx
client fixtures. Each test gets a fresh database file under ``tmp_path``;
the schema (including the partial unique index) is created from the ORM
metadata.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from shiftcare.database import Database, get_db
from shiftcare.main import app
from shiftcare.models import *  # noqa: F401,F403 — register all models with metadata
from shiftcare.models.user import User, UserRole
from shiftcare.utils.jwt import create_access_token
from shiftcare.utils.password import hash_password


# ---------------------------------------------------------------------------
# Function-scoped: DB 핸들, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """테스트마다 새 SQLite 파일 DB를 생성합니다."""
    handle = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    handle.init()
    await handle.create_all()
    yield handle
    await handle.dispose()


@pytest_asyncio.fixture
async def db(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(database: Database, db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.state.database = database
    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(
    db: AsyncSession,
    email: str,
    role: str = UserRole.USER,
    is_admitted: bool = True,
    first_name: str = "Test",
    last_name: str = "Nurse",
    password: str = "nurse123!",
) -> User:
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone_number="010-0000-0000",
        password_hash=hash_password(password),
        role=role,
        is_admitted=is_admitted,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await make_user(
        db, "admin@test.com", role=UserRole.ADMIN, first_name="Test", last_name="Admin", password="admin123!"
    )


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession) -> User:
    """승인된 직원(간호사)을 생성합니다."""
    return await make_user(db, "nurse@test.com")


@pytest_asyncio.fixture
async def pending_user(db: AsyncSession) -> User:
    """승인 전 직원을 생성합니다."""
    return await make_user(db, "pending@test.com", is_admitted=False, first_name="Pending")


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def staff_token(staff_user) -> str:
    return make_token(staff_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
