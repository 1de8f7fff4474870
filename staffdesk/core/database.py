# staffdesk/core/database.py

"""
애플리케이션의 데이터베이스 연결 및 세션 관리를 담당하는 모듈입니다.

- SQLModel의 비동기 엔진을 설정합니다 (연결 풀 크기/대기 시간 제한 포함).
- 요청 단위 비동기 세션 생성을 위한 의존성 함수를 제공합니다.
- 스키마는 Alembic 마이그레이션으로 관리합니다.
"""

from typing import Any, AsyncGenerator, Dict
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.config import settings

# 모든 SQLModel 클래스가 SQLModel.metadata에 등록되도록 명시적으로 임포트합니다.
from staffdesk.domains import models  # noqa: F401


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    드라이버에 맞는 엔진 옵션을 반환합니다.
    SQLite는 큐 기반 풀을 쓰지 않으므로 풀 크기 옵션을 넘기지 않습니다.
    """
    options: Dict[str, Any] = {"echo": settings.DEBUG_MODE, "future": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_recycle=3600,                       # 1시간마다 연결 재활용
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,   # 풀 고갈 시 무한 대기 방지
            pool_pre_ping=True,
        )
    return options


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL.get_secret_value(),
    **engine_options(settings.DATABASE_URL.get_secret_value()),
)

# 비동기 세션을 생성하는 '세션 공장'
AsyncSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 의존성 주입을 위한 비동기 데이터베이스 세션 제너레이터입니다.
    요청마다 새로운 세션을 생성하고, 요청 처리 후 세션을 자동으로 닫습니다.
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def get_async_session_context() -> AsyncGenerator[AsyncSession, None]:
    """
    CLI 스크립트 등 요청 밖에서 사용할 독립적인 비동기 DB 세션 컨텍스트 관리자입니다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
