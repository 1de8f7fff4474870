# staffdesk/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이메일은 대소문자를 구분하지 않고 고유해야 하므로 `lower(email)` 함수 기반 고유 인덱스를 둡니다.
애플리케이션의 사전 중복 검사는 편의일 뿐이며, 실제 보장은 이 인덱스가 합니다.
"""

import uuid
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import Index
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Column, Field, SQLModel


# =============================================================================
# users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    email: str = Field(max_length=255, description="로그인 이메일 (대소문자 무시 고유)")
    name: Optional[str] = Field(default=None, max_length=52, description="사용자 이름")
    user_image_uri: Optional[str] = Field(default=None, description="사용자 이미지 URI")
    company_name: Optional[str] = Field(default=None, max_length=52, description="회사명")
    company_image_uri: Optional[str] = Field(default=None, description="회사 이미지 URI")


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"

    user_id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="사용자 고유 ID")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


Index("uq_users_email_lower", func.lower(User.__table__.c.email), unique=True)
