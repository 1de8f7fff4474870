# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable, Dict

# 애플리케이션 설정은 임포트 시점에 로드되므로, staffdesk를 임포트하기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-staffdesk")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from staffdesk.main import app as main_app  # noqa: E402
from staffdesk.core import dependencies as deps  # noqa: E402
from staffdesk.core.config import settings  # noqa: E402
from staffdesk.core.database import get_session  # noqa: E402
from staffdesk.domains.models import *  # noqa: F401, F403, E402


# --- 테스트용 데이터베이스 설정 ---
# 메모리 SQLite를 하나의 연결(StaticPool)로 공유하고, 외래 키 검사를 켭니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    future=True,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False},
)


@event.listens_for(test_engine.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function", autouse=True)
async def setup_database():
    """
    각 테스트마다 모든 테이블을 삭제하고 재생성하여 테스트 간 격리를 보장합니다.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """업로드 파일은 테스트마다 임시 디렉토리에 저장합니다."""
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    monkeypatch.setattr(settings, "UPLOAD_BASE_URL", "http://files.test/uploads")
    return target


# --- 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    요청 세션을 테스트 세션으로 바꾼 비인증 AsyncClient를 반환합니다.
    """
    async def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides.update({
        get_session: override_get_session,
        deps.get_db_session: override_get_session,
    })
    try:
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


@pytest_asyncio.fixture(scope="function")
def register_user(client: AsyncClient) -> Callable[..., Awaitable[Dict[str, str]]]:
    """
    /v1/auth (action=create)로 계정을 만들고 {email, token}을 반환하는 팩토리입니다.
    """
    async def _register(email: str = "alice@example.com", password: str = "password123") -> Dict[str, str]:
        res = await client.post("/v1/auth", json={"email": email, "password": password, "action": "create"})
        if res.status_code != 201:
            pytest.fail(f"Registration failed for {email}: {res.text}")
        return res.json()
    return _register


@pytest_asyncio.fixture(scope="function")
async def auth_headers(register_user: Callable[..., Awaitable[Dict[str, str]]]) -> Dict[str, str]:
    """가입한 사용자의 Bearer 토큰 헤더."""
    body = await register_user()
    return {"Authorization": f"Bearer {body['token']}"}


@pytest_asyncio.fixture(scope="function")
async def authorized_client(client: AsyncClient, auth_headers: Dict[str, str]) -> AsyncClient:
    """가입한 사용자로 인증된 AsyncClient를 반환합니다."""
    client.headers.update(auth_headers)
    return client


@pytest_asyncio.fixture(scope="function")
async def department(authorized_client: AsyncClient) -> Dict[str, str]:
    """테스트용 부서를 API로 생성하고 응답 본문을 반환합니다."""
    res = await authorized_client.post("/v1/department", json={"name": "Engineering"})
    assert res.status_code == 201, res.text
    return res.json()


@pytest_asyncio.fixture(scope="function")
def employee_factory(authorized_client: AsyncClient, department: Dict[str, str]) -> Callable[..., Awaitable[Dict[str, str]]]:
    """기본 부서에 직원을 등록하는 팩토리입니다."""
    async def _create(identity_number: str, name: str = "Jane Doe", gender: str = "female", **extra) -> Dict[str, str]:
        payload = {
            "identityNumber": identity_number,
            "name": name,
            "gender": gender,
            "departmentId": department["departmentId"],
            **extra,
        }
        res = await authorized_client.post("/v1/employee", json=payload)
        assert res.status_code == 201, res.text
        return res.json()
    return _create
