# staffdesk/main.py

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlmodel.ext.asyncio.session import AsyncSession

# 핵심 설정 및 데이터베이스 모듈 임포트
from staffdesk import API_PREFIX, APP_NAME, APP_VERSION
from staffdesk.core.config import settings
from staffdesk.core.database import engine
from staffdesk.core.dependencies import get_db_session
from staffdesk.core.exceptions import StorageError, register_exception_handlers

# 각 도메인의 라우터
from staffdesk.domains.usr.routers import router as usr_router
from staffdesk.domains.hr.routers import router as hr_router
from staffdesk.domains.shared.routers import router as shared_router

# -- 로깅 설정 --
# 루트 로거는 여기서 한 번만 설정하고, 각 모듈은 logging.getLogger(__name__)을 사용합니다.
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    시작 시 업로드 디렉토리를 준비하고, 종료 시 데이터베이스 연결 풀을 닫습니다.
    스키마는 Alembic 마이그레이션으로 관리합니다.
    """
    logger.info("%s %s 시작 (env=%s)", APP_NAME, APP_VERSION, settings.APP_ENV)
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    yield  # 애플리케이션 실행

    logger.info("%s 종료 중...", APP_NAME)
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description="Account, department, employee and image upload API.",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 업로드된 이미지를 UPLOAD_BASE_URL(/uploads)로 제공합니다.
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 예외 핸들러 --
register_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=API_PREFIX)
app.include_router(hr_router, prefix=API_PREFIX)
app.include_router(shared_router, prefix=API_PREFIX)


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """
    데이터베이스에 SELECT 1을 실행해 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.execute(text("SELECT 1"))
        value = result.scalar()
    except Exception as e:
        logger.error("Database health check failed: %s", e)
        raise StorageError("Database connection error") from e
    if value != 1:
        raise StorageError("Database health check failed")
    return {"status": "ok", "database_connection": "successful"}


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("staffdesk.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
