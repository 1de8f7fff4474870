# staffdesk/domains/hr/routers.py

"""
'hr' 도메인 (부서 및 직원 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

모든 엔드포인트는 유효한 Bearer 토큰을 요구합니다.
부서/직원 레코드에는 소유자 개념이 없어, 인증된 사용자라면 누구나 접근할 수 있습니다.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core import dependencies as deps
from staffdesk.core.validation import json_payload

# hr 도메인의 CRUD, 스키마
from . import crud as hr_crud
from . import schemas as hr_schemas


router = APIRouter(
    tags=["HR (부서 및 직원 관리)"],
    responses={404: {"description": "Not found"}},
    dependencies=[Depends(deps.get_auth_context)],
)


# =============================================================================
# 1. 부서 (Department) 관리 엔드포인트
# =============================================================================
@router.post("/department", response_model=hr_schemas.DepartmentRead, status_code=status.HTTP_201_CREATED, summary="새 부서 생성")
async def create_department(
    payload: hr_schemas.DepartmentCreate = Depends(json_payload(hr_schemas.DepartmentCreate)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hr_crud.department.create(db, obj_in=payload)


@router.get("/department", response_model=List[hr_schemas.DepartmentRead], summary="부서 검색")
async def read_departments(
    name: Optional[str] = Query(None, description="부서명 부분 일치 (대소문자 무시)"),
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hr_crud.department.search(db, name=name, limit=limit, offset=offset)


@router.patch("/department/{department_id}", response_model=hr_schemas.DepartmentRead, summary="부서 수정")
async def update_department(
    department_id: uuid.UUID,
    payload: hr_schemas.DepartmentUpdate = Depends(json_payload(hr_schemas.DepartmentUpdate)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hr_crud.department.update(db, department_id=department_id, changes=payload.changes())


@router.delete("/department/{department_id}", summary="부서 삭제")
async def delete_department(
    department_id: uuid.UUID,
    db: AsyncSession = Depends(deps.get_db_session),
):
    """소속 직원이 남아 있으면 409를 반환합니다."""
    await hr_crud.department.remove(db, department_id=department_id)
    return {"message": "Department deleted successfully"}


# =============================================================================
# 2. 직원 (Employee) 관리 엔드포인트
# =============================================================================
@router.post("/employee", response_model=hr_schemas.EmployeeRead, status_code=status.HTTP_201_CREATED, summary="새 직원 등록")
async def create_employee(
    payload: hr_schemas.EmployeeCreate = Depends(json_payload(hr_schemas.EmployeeCreate)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hr_crud.employee.create(db, obj_in=payload)


@router.get("/employee", response_model=List[hr_schemas.EmployeeRead], summary="직원 검색")
async def read_employees(
    identity_number: Optional[str] = Query(None, alias="identityNumber", description="식별 번호 접두사 (대소문자 무시)"),
    name: Optional[str] = Query(None, description="이름 부분 일치 (대소문자 무시)"),
    gender: Optional[hr_schemas.Gender] = Query(None),
    department_id: Optional[uuid.UUID] = Query(None, alias="departmentId"),
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await hr_crud.employee.search(
        db,
        identity_number=identity_number,
        name=name,
        gender=gender.value if gender else None,
        department_id=department_id,
        limit=limit,
        offset=offset,
    )


@router.patch("/employee/{identity_number}", response_model=hr_schemas.EmployeeRead, summary="직원 정보 수정")
async def update_employee(
    identity_number: str,
    payload: hr_schemas.EmployeeUpdate = Depends(json_payload(hr_schemas.EmployeeUpdate)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """요청에 포함된 필드와 updatedAt만 변경됩니다."""
    return await hr_crud.employee.update(db, identity_number=identity_number, changes=payload.changes())


@router.delete("/employee/{identity_number}", summary="직원 삭제")
async def delete_employee(
    identity_number: str,
    db: AsyncSession = Depends(deps.get_db_session),
):
    await hr_crud.employee.remove(db, identity_number=identity_number)
    return {"message": "Employee deleted successfully"}
