"""FastAPI 애플리케이션 엔트리포인트 — 수명주기, 미들웨어 및 라우터 등록.

FastAPI application entry point — Lifespan, middleware and router registration.
The lifespan owns the database handle and the reminder scheduler: both
are created at startup and torn down at shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shiftcare.config import settings
from shiftcare.database import Database
from shiftcare.middleware.axiom_logging import AxiomLoggingMiddleware
from shiftcare.services.reminder_scheduler import ReminderScheduler
from shiftcare.utils.exceptions import InternalError
from shiftcare.utils.logger import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """DB 핸들과 알림 스케줄러의 수명주기 (Startup/shutdown of DB and scheduler)."""
    setup_logging(settings.LOG_LEVEL)

    database = Database(settings.DATABASE_URL, echo=settings.DEBUG)
    database.init()
    app.state.database = database

    scheduler: ReminderScheduler | None = None
    if settings.REMINDER_ENABLED:
        scheduler = ReminderScheduler(database.session_factory)
        scheduler.start()

    logger.info("%s started", settings.APP_NAME)
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        await database.dispose()
        logger.info("%s stopped", settings.APP_NAME)


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """처리되지 않은 DB 오류를 InternalError(500)로 변환 (Unhandled storage failure -> 500)."""
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return await http_exception_handler(request, InternalError())


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from shiftcare.api.admin import admin_router  # noqa: E402
from shiftcare.api.app import app_router  # noqa: E402
from shiftcare.api.auth import router as auth_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(app_router, prefix="/api/v1/app")
