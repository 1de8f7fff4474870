# staffdesk/domains/shared/crud.py

"""
'shared' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

import uuid

from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.crud_base import CRUDBase
from . import models as shared_models


class CRUDFile(CRUDBase[shared_models.File]):
    def __init__(self):
        super().__init__(model=shared_models.File, key_column="file_id", not_found_message="File not found")

    async def create(self, db: AsyncSession, *, user_id: uuid.UUID, uri: str) -> shared_models.File:
        return await self.insert(db, shared_models.File(user_id=user_id, uri=uri))


file = CRUDFile()
