# staffdesk/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.

조회/수정/삭제는 `staffdesk.core.query_builder`가 만든 파라미터화된 SQL로 실행하고,
생성은 ORM 세션(add/commit/refresh)으로 처리합니다.
모든 저장소 예외는 `translate_store_error`로 공통 오류 체계에 맞춰 변환됩니다.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Table, select
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.exceptions import AppError, BadRequest, NotFound, translate_store_error
from staffdesk.core.query_builder import DeleteBuilder, EmptyUpdateError, SelectBuilder, UpdateBuilder

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)


class CRUDBase(Generic[ModelType]):
    """
    모든 리포지토리의 기본 클래스를 정의합니다.

    Args:
        model: SQLModel 테이블 클래스
        key_column: 단건 조회/수정/삭제에 사용하는 키 컬럼 이름
        not_found_message: 대상 행이 없을 때의 오류 메시지
        conflict_message: 고유 제약 위반 시의 오류 메시지
    """

    def __init__(
        self,
        model: Type[ModelType],
        *,
        key_column: str,
        not_found_message: str = "Not found",
        conflict_message: str = "Resource already exists",
    ):
        self.model = model
        self.key_column = key_column
        self.not_found_message = not_found_message
        self.conflict_message = conflict_message

    @property
    def table(self) -> Table:
        return self.model.__table__

    # --- 빌더 생성 ---
    def select_builder(self) -> SelectBuilder:
        """모델의 모든 컬럼을 명시적으로 나열한 SELECT 빌더."""
        projection = ", ".join(column.name for column in self.table.columns)
        return SelectBuilder(self.table, projection)

    def update_builder(self, key_value: Any) -> UpdateBuilder:
        return UpdateBuilder(self.table, self.key_column, key_value)

    @staticmethod
    def dialect_name(db: AsyncSession) -> str:
        return db.get_bind().dialect.name

    # --- 조회 ---
    async def fetch_all(self, db: AsyncSession, builder: SelectBuilder) -> List[ModelType]:
        statement = builder.build(self.dialect_name(db)).to_text(columns=list(self.table.columns))
        orm_statement = select(self.model).from_statement(statement).execution_options(populate_existing=True)
        try:
            result = await db.execute(orm_statement)
        except Exception as e:
            await db.rollback()
            raise translate_store_error(e, conflict_message=self.conflict_message) from e
        return list(result.scalars().all())

    async def fetch_one(self, db: AsyncSession, builder: SelectBuilder) -> Optional[ModelType]:
        rows = await self.fetch_all(db, builder.paginate(limit=1))
        return rows[0] if rows else None

    async def get(self, db: AsyncSession, key_value: Any) -> Optional[ModelType]:
        """키 컬럼 기준 단건 조회. 없으면 None."""
        return await self.fetch_one(db, self.select_builder().where_equals(self.key_column, key_value))

    async def get_or_404(self, db: AsyncSession, key_value: Any) -> ModelType:
        db_obj = await self.get(db, key_value)
        if db_obj is None:
            raise NotFound(self.not_found_message)
        return db_obj

    async def exists(self, db: AsyncSession, builder: SelectBuilder) -> bool:
        """빌더의 조건을 만족하는 행이 하나라도 있는지 확인합니다."""
        statement = builder.paginate(limit=1).build(self.dialect_name(db)).to_text()
        try:
            result = await db.execute(statement)
        except Exception as e:
            await db.rollback()
            raise translate_store_error(e, conflict_message=self.conflict_message) from e
        return result.first() is not None

    # --- 생성 ---
    async def insert(self, db: AsyncSession, db_obj: ModelType, *, reference_error: Optional[AppError] = None) -> ModelType:
        """
        새 레코드를 저장합니다. 동시 생성 경쟁은 저장소의 고유 제약이 Conflict로 드러냅니다.
        참조 대상이 그 사이 사라져 외래 키 제약에 걸리면 reference_error를 냅니다.
        """
        db.add(db_obj)
        try:
            await db.commit()
        except Exception as e:
            await db.rollback()
            raise translate_store_error(e, conflict_message=self.conflict_message, reference_error=reference_error) from e
        await db.refresh(db_obj)
        return db_obj

    # --- 수정 ---
    async def execute_update(
        self, db: AsyncSession, builder: UpdateBuilder, *, reference_error: Optional[AppError] = None,
    ) -> ModelType:
        """
        부분 수정 UPDATE를 실행하고 갱신된 행을 다시 읽어 반환합니다.
        영향받은 행이 없으면 NotFound, 외래 키 제약 위반은 reference_error (없으면 Conflict).
        """
        try:
            statement = builder.build().to_text()
        except EmptyUpdateError as e:
            raise BadRequest(str(e)) from e

        try:
            result = await db.execute(statement)
            if result.rowcount == 0:
                await db.rollback()
                raise NotFound(self.not_found_message)
            await db.commit()
        except NotFound:
            raise
        except Exception as e:
            await db.rollback()
            raise translate_store_error(e, conflict_message=self.conflict_message, reference_error=reference_error) from e

        # 키 컬럼 자체가 바뀌었을 수 있으므로 새 키로 다시 읽습니다.
        return await self.get_or_404(db, builder.assigned_value(self.key_column, builder.key_value))

    # --- 삭제 ---
    async def delete_by_key(self, db: AsyncSession, key_value: Any, *, conflict_message: Optional[str] = None) -> None:
        """
        키 기준 단건 삭제. 영향받은 행이 없으면 NotFound.
        다른 행이 참조 중이라 외래 키 제약에 걸리면 conflict_message로 Conflict.
        """
        statement = DeleteBuilder(self.table, self.key_column, key_value).build().to_text()
        try:
            result = await db.execute(statement)
            if result.rowcount == 0:
                await db.rollback()
                raise NotFound(self.not_found_message)
            await db.commit()
        except NotFound:
            raise
        except Exception as e:
            await db.rollback()
            raise translate_store_error(e, conflict_message=conflict_message or self.conflict_message) from e
