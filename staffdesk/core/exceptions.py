# staffdesk/core/exceptions.py

"""
애플리케이션 공통 오류 분류 체계를 정의하는 모듈입니다.

모든 오류 응답은 `{"error": "<메시지>"}` 형태의 JSON 본문과
오류 종류에 대응하는 HTTP 상태 코드를 가집니다.
저장소(DB) 오류는 드라이버가 제공하는 구조화된 오류 코드(SQLSTATE 등)로 분류하며,
오류 메시지 문자열은 검사하지 않습니다.
"""

import enum
import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import exc as sa_exc
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """HTTP 상태 코드와 안정적인 오류 메시지를 가지는 기본 애플리케이션 오류."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class BadRequest(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class ValidationFailed(BadRequest):
    """
    요청 본문 검증 실패. 필드 이름 → 위반한 규칙 목록 매핑을 함께 전달합니다.
    """
    default_message = "Validation failed"

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["fields"] = self.errors
        return result


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StorageError(AppError):
    """예상하지 못한 저장소/외부 연동 오류 (InternalServerError)."""
    default_message = "Internal server error"


# =============================================================================
# 저장소 오류 분류
# =============================================================================
class StoreErrorKind(enum.Enum):
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    NOT_NULL_VIOLATION = "not_null_violation"
    OTHER = "other"


# PostgreSQL SQLSTATE (class 23: integrity constraint violation)
_SQLSTATE_KINDS = {
    "23505": StoreErrorKind.UNIQUE_VIOLATION,
    "23503": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "23502": StoreErrorKind.NOT_NULL_VIOLATION,
}

# SQLite 확장 결과 코드 이름
_SQLITE_KINDS = {
    "SQLITE_CONSTRAINT_UNIQUE": StoreErrorKind.UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_PRIMARYKEY": StoreErrorKind.UNIQUE_VIOLATION,
    "SQLITE_CONSTRAINT_FOREIGNKEY": StoreErrorKind.FOREIGN_KEY_VIOLATION,
    "SQLITE_CONSTRAINT_NOTNULL": StoreErrorKind.NOT_NULL_VIOLATION,
}


def classify_store_error(error: sa_exc.DBAPIError) -> StoreErrorKind:
    """
    SQLAlchemy가 감싼 DBAPI 오류에서 드라이버의 구조화된 오류 코드를 읽어 분류합니다.
    asyncpg/psycopg는 `sqlstate`(또는 `pgcode`), sqlite3는 `sqlite_errorname`을 제공합니다.
    """
    orig = getattr(error, "orig", None)
    if orig is None:
        return StoreErrorKind.OTHER

    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate:
        return _SQLSTATE_KINDS.get(str(sqlstate), StoreErrorKind.OTHER)

    # aiosqlite 어댑터는 원래의 sqlite3 예외를 __cause__ 로 연결합니다.
    for candidate in (orig, getattr(orig, "__cause__", None)):
        errorname = getattr(candidate, "sqlite_errorname", None)
        if errorname:
            return _SQLITE_KINDS.get(errorname, StoreErrorKind.OTHER)
    return StoreErrorKind.OTHER


def translate_store_error(
    error: Exception,
    *,
    conflict_message: str = "Resource already exists",
    reference_error: Optional[AppError] = None,
) -> AppError:
    """
    저장소 계층에서 발생한 예외를 공통 오류 체계로 변환합니다.
    - 고유 제약 위반 → Conflict
    - 외래 키 제약 위반 → reference_error가 주어지면 그 오류 (예: 참조 대상 부서가 사라진 경우 NotFound),
      아니면 Conflict
    - 연결 풀 대기 시간 초과, 그 밖의 예외 → StorageError
    """
    if isinstance(error, AppError):
        return error
    if isinstance(error, sa_exc.TimeoutError):
        logger.error("Timed out waiting for a database connection: %s", error)
        return StorageError("Database connection pool exhausted")
    if isinstance(error, sa_exc.DBAPIError):
        kind = classify_store_error(error)
        if kind is StoreErrorKind.FOREIGN_KEY_VIOLATION and reference_error is not None:
            logger.info("Foreign key violation: %s", reference_error.message)
            return reference_error
        if kind in (StoreErrorKind.UNIQUE_VIOLATION, StoreErrorKind.FOREIGN_KEY_VIOLATION):
            logger.info("Constraint violation (%s): %s", kind.value, conflict_message)
            return Conflict(conflict_message)
        logger.error("Database error (%s): %s", kind.value, error)
        return StorageError("Database error")
    logger.error("Unexpected storage error: %r", error)
    return StorageError()


# =============================================================================
# FastAPI 예외 핸들러
# =============================================================================
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """쿼리/경로 파라미터 변환 실패를 400 응답으로 통일합니다."""
    fields: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "path", "body", "header")]
        fields.setdefault(".".join(loc) or "request", []).append(error.get("type", "invalid"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationFailed(fields).to_dict(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
