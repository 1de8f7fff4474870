# staffdesk/domains/hr/models.py

"""
'hr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- departments: 부서명은 고유합니다.
- employees: 식별 번호는 고유하며, department_id는 departments를 참조합니다 (삭제 시 RESTRICT).
"""

import uuid
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Column, Field, SQLModel


# =============================================================================
# 1. departments 테이블 모델
# =============================================================================
class DepartmentBase(SQLModel):
    name: str = Field(max_length=33, sa_column_kwargs={"unique": True}, description="부서명")


class Department(DepartmentBase, table=True):
    """
    departments 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "departments"

    department_id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="부서 고유 ID")

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


# =============================================================================
# 2. employees 테이블 모델
# =============================================================================
class EmployeeBase(SQLModel):
    identity_number: str = Field(max_length=33, sa_column_kwargs={"unique": True}, description="직원 식별 번호")
    name: str = Field(max_length=33, description="직원 이름")
    employee_image_uri: Optional[str] = Field(default=None, description="직원 이미지 URI")
    gender: str = Field(max_length=6, description="성별 (male/female)")


class Employee(EmployeeBase, table=True):
    """
    employees 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "employees"

    employee_id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="직원 고유 ID")
    department_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("departments.department_id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="소속 부서 ID (FK)"
    )

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
