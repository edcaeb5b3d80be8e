"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
The engine is owned by an explicitly constructed ``Database`` handle that is
initialized in the application lifespan and disposed at shutdown. Request
handlers reach it through the ``get_db`` dependency; the reminder scheduler
receives its session factory directly.
"""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models.
    """

    pass


class Database:
    """비동기 엔진과 세션 팩토리를 소유하는 핸들.

    Handle owning the async engine and session factory.

    Attributes:
        url: 데이터베이스 연결 문자열 (Database connection string)
        engine: 비동기 엔진, init() 이후 사용 가능 (Async engine, available after init())
        session_factory: 세션 팩토리 (Async session factory)
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url: str = url
        self.echo: bool = echo
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    def init(self) -> None:
        """엔진과 세션 팩토리를 생성합니다.

        Create the engine and session factory. Pool sizing only applies to
        server databases; SQLite uses its default pool.
        """
        engine_kwargs: dict = {"echo": self.echo, "pool_pre_ping": True}
        if self.url.startswith("postgresql"):
            engine_kwargs.update(
                pool_size=5,
                max_overflow=10,
                # 트랜잭션 모드 풀러에서 prepared statement 비활성화
                # Disable prepared statement caches for transaction-mode pooling
                connect_args={"statement_cache_size": 0},
            )
        self.engine = create_async_engine(self.url, **engine_kwargs)
        # expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_all(self) -> None:
        """ORM 메타데이터로 테이블을 생성합니다 (Create tables from ORM metadata)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """커넥션 풀을 정리합니다 (Dispose the connection pool)."""
        if self.engine is not None:
            await self.engine.dispose()
        self.engine = None
        self.session_factory = None


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session from the
    ``Database`` stored on ``app.state`` by the lifespan handler.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
