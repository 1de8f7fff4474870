# staffdesk/domains/shared/models.py

"""
'shared' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
files 테이블은 업로드 기록으로, 생성 후 수정되지 않습니다.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Column, Field, SQLModel


class File(SQLModel, table=True):
    """
    files 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "files"

    file_id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="파일 고유 ID")
    user_id: uuid.UUID = Field(
        sa_column=Column(Uuid, ForeignKey("users.user_id"), nullable=False, index=True),
        description="업로드한 사용자 ID (FK)"
    )
    uri: str = Field(description="저장된 파일의 공개 URI")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now()),
        description="업로드 일시"
    )
