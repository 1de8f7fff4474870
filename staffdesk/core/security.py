# staffdesk/core/security.py

"""
애플리케이션의 보안 관련 유틸리티를 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증 (passlib bcrypt).
- 서명된, 만료 시간이 있는 신원 토큰(JWT) 발급 및 검증.

토큰 검증은 토큰 문자열, 서명 키, 현재 시각만으로 결정되는 순수 함수이며
어떤 I/O도 수행하지 않습니다.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from staffdesk.core.config import settings

logger = logging.getLogger(__name__)


# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """일반 텍스트 비밀번호와 해싱된 비밀번호가 일치하는지 확인합니다."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """주어진 비밀번호를 해싱합니다."""
    return pwd_context.hash(password)


# =============================================================================
# 신원 토큰 코덱
# =============================================================================
class AuthErrorKind(enum.Enum):
    MALFORMED = "malformed"
    EXPIRED = "expired"
    SIGNATURE_INVALID = "signature_invalid"


class AuthError(Exception):
    """토큰 검증 실패. `kind`로 실패 원인을 구분합니다."""

    def __init__(self, kind: AuthErrorKind, message: str = ""):
        self.kind = kind
        super().__init__(message or kind.value)


@dataclass(frozen=True)
class Claims:
    subject: str
    expiry: datetime
    issued_at: Optional[datetime] = None


class TokenCodec:
    """
    사용자 식별자를 담은 서명 토큰을 발급/검증합니다.
    서명 키는 프로세스 시작 시 한 번 로드된 설정값이며, 키 교체는 지원하지 않습니다.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("Token signing secret cannot be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject: str, ttl: Optional[timedelta] = None) -> str:
        """subject(사용자 ID)와 만료 시각을 담은 토큰을 발급합니다."""
        now = datetime.now(timezone.utc)
        expire = now + (ttl if ttl is not None else self.ttl)
        to_encode = {"sub": str(subject), "iat": int(now.timestamp()), "exp": int(expire.timestamp())}
        return jwt.encode(to_encode, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Claims:
        """
        토큰을 검증하고 Claims를 반환합니다.

        Raises:
            AuthError(MALFORMED): 디코딩할 수 없거나 필수 클레임(sub, exp)이 없거나 잘못된 경우
            AuthError(EXPIRED): 현재 시각이 만료 시각을 지난 경우
            AuthError(SIGNATURE_INVALID): 서명 검증에 실패한 경우
        """
        # 1) 서명 검증 전에 구조부터 확인합니다. 파싱 불가 토큰은 서명 오류와 구분됩니다.
        try:
            jwt.get_unverified_header(token)
            unverified = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise AuthError(AuthErrorKind.MALFORMED, "Token could not be decoded") from e
        if "sub" not in unverified or "exp" not in unverified:
            raise AuthError(AuthErrorKind.MALFORMED, "Token is missing required claims")

        # 2) 서명 및 만료 검증
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except ExpiredSignatureError as e:
            raise AuthError(AuthErrorKind.EXPIRED, "Token has expired") from e
        except JWTClaimsError as e:
            raise AuthError(AuthErrorKind.MALFORMED, "Token claims are invalid") from e
        except JWTError as e:
            raise AuthError(AuthErrorKind.SIGNATURE_INVALID, "Token signature is invalid") from e

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthError(AuthErrorKind.MALFORMED, "Token subject is missing")

        issued_at = payload.get("iat")
        return Claims(
            subject=subject,
            expiry=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc) if isinstance(issued_at, (int, float)) else None,
        )


token_codec = TokenCodec(
    settings.SECRET_KEY.get_secret_value(),
    algorithm=settings.ALGORITHM,
    ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """설정 기반 코덱으로 Access Token을 생성합니다."""
    return token_codec.issue(subject, ttl=expires_delta)
