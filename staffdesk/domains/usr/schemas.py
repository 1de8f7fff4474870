# staffdesk/domains/usr/schemas.py

"""
'usr' 도메인의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from enum import Enum
from typing import Annotated, Optional

from pydantic import EmailStr, StringConstraints

from staffdesk.core.validation import APISchema, NotNull, PartialUpdate, UrlStr

Password = Annotated[str, StringConstraints(min_length=8, max_length=32)]
ProfileName = Annotated[str, StringConstraints(min_length=4, max_length=52)]


# =============================================================================
# 1. 인증 (Authentication) 스키마
# =============================================================================
class AuthAction(str, Enum):
    CREATE = "create"
    LOGIN = "login"


class AuthRequest(APISchema):
    """가입(create)과 로그인(login)을 하나의 엔드포인트에서 처리하는 요청."""
    email: EmailStr
    password: Password
    action: AuthAction


class AuthResponse(APISchema):
    email: str
    token: str


# =============================================================================
# 2. 사용자 프로필 스키마
# =============================================================================
class UserProfile(APISchema):
    email: str
    name: Optional[str] = None
    user_image_uri: Optional[str] = None
    company_name: Optional[str] = None
    company_image_uri: Optional[str] = None


class UserProfileUpdate(PartialUpdate):
    """
    프로필 부분 수정. 이메일은 null로 지울 수 없고, 나머지 필드는 null로 비울 수 있습니다.
    """
    email: Annotated[Optional[EmailStr], NotNull] = None
    name: Optional[ProfileName] = None
    user_image_uri: Optional[UrlStr] = None
    company_name: Optional[ProfileName] = None
    company_image_uri: Optional[UrlStr] = None
