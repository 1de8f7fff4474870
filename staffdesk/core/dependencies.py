# staffdesk/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 인증 게이트 (get_auth_context): 요청 헤더의 Bearer 토큰을 검증해
  인증된 요청 컨텍스트(AuthContext)를 한 번 생성하고, 이후 리포지토리 호출에 명시적으로 전달합니다.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import Header
from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.database import get_session as get_main_app_session
from staffdesk.core.exceptions import Unauthorized
from staffdesk.core.security import AuthError, Claims, token_codec

logger = logging.getLogger(__name__)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """staffdesk.core.database.get_session을 래핑한 세션 의존성입니다."""
    async for session in get_main_app_session():
        yield session


@dataclass(frozen=True)
class AuthContext:
    """인증 게이트를 통과한 요청의 신원 정보."""
    user_id: uuid.UUID
    claims: Claims


def extract_bearer_token(authorization: Optional[str]) -> str:
    """`Authorization: Bearer <token>` 헤더에서 토큰을 꺼냅니다. 없거나 비어 있으면 Unauthorized."""
    if not authorization:
        raise Unauthorized("Missing token")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Missing token")
    return token.strip()


def authenticate(authorization: Optional[str]) -> AuthContext:
    """
    인증 게이트의 세 단계를 순서대로 수행합니다.
    1) 토큰 추출  2) 토큰 검증  3) subject를 사용자 ID(UUID)로 해석
    어느 단계든 실패하면 Unauthorized (클라이언트 데이터이므로 500이 아님).
    """
    token = extract_bearer_token(authorization)

    try:
        claims = token_codec.verify(token)
    except AuthError as e:
        logger.info("Rejected bearer token: %s", e.kind.value)
        raise Unauthorized("Invalid token") from e

    try:
        user_id = uuid.UUID(claims.subject)
    except ValueError as e:
        logger.info("Rejected bearer token: malformed subject")
        raise Unauthorized("Invalid token") from e

    return AuthContext(user_id=user_id, claims=claims)


async def get_auth_context(authorization: Optional[str] = Header(None)) -> AuthContext:
    """모든 보호된 엔드포인트가 의존하는 인증 게이트 의존성입니다."""
    return authenticate(authorization)
