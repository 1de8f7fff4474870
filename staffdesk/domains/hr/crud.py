# staffdesk/domains/hr/crud.py

"""
'hr' 도메인의 CRUD 작업을 담당하는 모듈입니다.

고유성(부서명, 식별 번호)과 참조 무결성(직원 → 부서)은 먼저 애플리케이션에서 검사해
명확한 오류 메시지를 돌려주고, 동시 요청 경쟁은 저장소 제약 위반이 같은 Conflict로 드러납니다.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.crud_base import CRUDBase
from staffdesk.core.exceptions import Conflict, NotFound
from . import models as hr_models
from . import schemas as hr_schemas

logger = logging.getLogger(__name__)

DEPARTMENT_NAME_EXISTS = "Department name already exists"
DEPARTMENT_NOT_EMPTY = "Department still contains employees"
IDENTITY_NUMBER_EXISTS = "Identity number already exists"
DEPARTMENT_NOT_FOUND = "Department not found"


# =============================================================================
# 1. departments 테이블 CRUD
# =============================================================================
class CRUDDepartment(CRUDBase[hr_models.Department]):
    def __init__(self):
        super().__init__(
            model=hr_models.Department,
            key_column="department_id",
            not_found_message=DEPARTMENT_NOT_FOUND,
            conflict_message=DEPARTMENT_NAME_EXISTS,
        )

    async def name_taken(self, db: AsyncSession, *, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        builder = self.select_builder().where_equals("name", name).where_not_equals("department_id", exclude_id)
        return await self.exists(db, builder)

    async def create(self, db: AsyncSession, *, obj_in: hr_schemas.DepartmentCreate) -> hr_models.Department:
        if await self.name_taken(db, name=obj_in.name):
            raise Conflict(DEPARTMENT_NAME_EXISTS)
        return await self.insert(db, hr_models.Department(name=obj_in.name))

    async def search(
        self,
        db: AsyncSession,
        *,
        name: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[hr_models.Department]:
        """부서명 부분 일치(대소문자 무시) 검색. 최근 생성 순."""
        builder = (
            self.select_builder()
            .where_contains("name", name)
            .order_by("created_at", descending=True)
            .paginate(limit=limit, offset=offset)
        )
        return await self.fetch_all(db, builder)

    async def update(self, db: AsyncSession, *, department_id: uuid.UUID, changes: Dict[str, Any]) -> hr_models.Department:
        await self.get_or_404(db, department_id)
        if "name" in changes and await self.name_taken(db, name=changes["name"], exclude_id=department_id):
            raise Conflict(DEPARTMENT_NAME_EXISTS)
        return await self.execute_update(db, self.update_builder(department_id).set_many(changes))

    async def remove(self, db: AsyncSession, *, department_id: uuid.UUID) -> None:
        """
        부서를 삭제합니다. 소속 직원이 있으면 삭제를 거부합니다 (연쇄 삭제 없음).
        """
        await self.get_or_404(db, department_id)

        # 해당 부서를 참조하는 직원이 있는지 확인
        if await employee.exists(db, employee.select_builder().where_equals("department_id", department_id)):
            raise Conflict(DEPARTMENT_NOT_EMPTY)

        # 검사와 삭제 사이에 직원이 추가되면 외래 키 제약이 같은 Conflict를 냅니다.
        await self.delete_by_key(db, department_id, conflict_message=DEPARTMENT_NOT_EMPTY)
        logger.info("Deleted department %s", department_id)


department = CRUDDepartment()


# =============================================================================
# 2. employees 테이블 CRUD
# =============================================================================
class CRUDEmployee(CRUDBase[hr_models.Employee]):
    def __init__(self):
        super().__init__(
            model=hr_models.Employee,
            key_column="identity_number",
            not_found_message="Employee not found",
            conflict_message=IDENTITY_NUMBER_EXISTS,
        )

    async def identity_number_taken(self, db: AsyncSession, *, identity_number: str) -> bool:
        return await self.exists(db, self.select_builder().where_equals("identity_number", identity_number))

    async def create(self, db: AsyncSession, *, obj_in: hr_schemas.EmployeeCreate) -> hr_models.Employee:
        if await self.identity_number_taken(db, identity_number=obj_in.identity_number):
            raise Conflict(IDENTITY_NUMBER_EXISTS)

        department_id = uuid.UUID(obj_in.department_id)
        await department.get_or_404(db, department_id)

        db_employee = hr_models.Employee(
            identity_number=obj_in.identity_number,
            name=obj_in.name,
            employee_image_uri=obj_in.employee_image_uri,
            gender=obj_in.gender,
            department_id=department_id,
        )
        # 확인 이후 부서가 삭제되면 외래 키 제약 위반이 같은 NotFound로 드러납니다.
        return await self.insert(db, db_employee, reference_error=NotFound(DEPARTMENT_NOT_FOUND))

    async def search(
        self,
        db: AsyncSession,
        *,
        identity_number: Optional[str] = None,
        name: Optional[str] = None,
        gender: Optional[str] = None,
        department_id: Optional[uuid.UUID] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[hr_models.Employee]:
        """
        식별 번호 접두사, 이름 부분 일치(둘 다 대소문자 무시), 성별/부서 일치로 검색합니다.
        전달된 조건만 WHERE 절에 들어갑니다. 최근 생성 순.
        """
        builder = (
            self.select_builder()
            .where_prefix("identity_number", identity_number)
            .where_contains("name", name)
            .where_equals("gender", gender)
            .where_equals("department_id", department_id)
            .order_by("created_at", descending=True)
            .paginate(limit=limit, offset=offset)
        )
        return await self.fetch_all(db, builder)

    async def update(self, db: AsyncSession, *, identity_number: str, changes: Dict[str, Any]) -> hr_models.Employee:
        """
        식별 번호로 찾은 직원을 부분 수정합니다.
        새 식별 번호는 중복 검사하고, 새 부서는 존재해야 합니다.
        """
        await self.get_or_404(db, identity_number)

        new_identity_number = changes.get("identity_number")
        if new_identity_number is not None and new_identity_number != identity_number:
            if await self.identity_number_taken(db, identity_number=new_identity_number):
                raise Conflict(IDENTITY_NUMBER_EXISTS)

        if changes.get("department_id") is not None:
            changes = {**changes, "department_id": uuid.UUID(changes["department_id"])}
            await department.get_or_404(db, changes["department_id"])

        return await self.execute_update(
            db,
            self.update_builder(identity_number).set_many(changes),
            reference_error=NotFound(DEPARTMENT_NOT_FOUND),
        )

    async def remove(self, db: AsyncSession, *, identity_number: str) -> None:
        await self.delete_by_key(db, identity_number)
        logger.info("Deleted employee %s", identity_number)


employee = CRUDEmployee()
