# staffdesk/domains/hr/schemas.py

"""
'hr' 도메인 (부서 및 직원)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import StringConstraints

from staffdesk.core.validation import APISchema, IdentifierStr, NotNull, PartialUpdate, UrlStr

DepartmentName = Annotated[str, StringConstraints(min_length=4, max_length=33)]
IdentityNumber = Annotated[str, StringConstraints(min_length=5, max_length=33)]
EmployeeName = Annotated[str, StringConstraints(min_length=4, max_length=33)]


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


# =============================================================================
# 1. 부서 (Department) 스키마
# =============================================================================
class DepartmentCreate(APISchema):
    name: DepartmentName


class DepartmentUpdate(PartialUpdate):
    name: Annotated[Optional[DepartmentName], NotNull] = None


class DepartmentRead(APISchema):
    department_id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 2. 직원 (Employee) 스키마
# =============================================================================
class EmployeeCreate(APISchema):
    identity_number: IdentityNumber
    name: EmployeeName
    employee_image_uri: Optional[UrlStr] = None
    gender: Gender
    department_id: IdentifierStr


class EmployeeUpdate(PartialUpdate):
    """직원 부분 수정. 이미지 URI만 null로 비울 수 있습니다."""
    identity_number: Annotated[Optional[IdentityNumber], NotNull] = None
    name: Annotated[Optional[EmployeeName], NotNull] = None
    employee_image_uri: Optional[UrlStr] = None
    gender: Annotated[Optional[Gender], NotNull] = None
    department_id: Annotated[Optional[IdentifierStr], NotNull] = None


class EmployeeRead(APISchema):
    identity_number: str
    name: str
    employee_image_uri: Optional[str] = None
    gender: str
    department_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
