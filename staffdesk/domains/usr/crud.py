# staffdesk/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core.crud_base import CRUDBase
from staffdesk.core.dependencies import AuthContext
from staffdesk.core.exceptions import Conflict, NotFound, Unauthorized
from staffdesk.core.security import get_password_hash, verify_password
from . import models as usr_models

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "Email already exists"


class CRUDUser(CRUDBase[usr_models.User]):
    def __init__(self):
        super().__init__(
            model=usr_models.User,
            key_column="user_id",
            not_found_message="User not found",
            conflict_message=EMAIL_EXISTS,
        )

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일(대소문자 무시)로 사용자를 조회합니다."""
        return await self.fetch_one(db, self.select_builder().where_iequals("email", email))

    async def email_taken(self, db: AsyncSession, *, email: str, exclude_user_id: Optional[uuid.UUID] = None) -> bool:
        """다른 사용자가 같은 이메일(대소문자 무시)을 쓰고 있는지 확인합니다."""
        builder = self.select_builder().where_iequals("email", email).where_not_equals("user_id", exclude_user_id)
        return await self.exists(db, builder)

    async def create(self, db: AsyncSession, *, email: str, password: str) -> usr_models.User:
        """새로운 사용자를 생성하며 비밀번호를 해싱하고 중복을 검사합니다."""
        if await self.email_taken(db, email=email):
            raise Conflict(EMAIL_EXISTS)

        db_user = usr_models.User(email=email, password_hash=get_password_hash(password))
        db_user = await self.insert(db, db_user)
        logger.info("Registered user %s", db_user.user_id)
        return db_user

    async def authenticate(self, db: AsyncSession, *, email: str, password: str) -> usr_models.User:
        """
        이메일과 비밀번호로 사용자를 인증합니다.
        등록되지 않은 이메일은 NotFound, 비밀번호 불일치는 Unauthorized.
        """
        user = await self.get_by_email(db, email=email)
        if user is None:
            raise NotFound("User not found")
        if not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid credentials")
        return user

    async def update_profile(self, db: AsyncSession, *, auth: AuthContext, changes: Dict[str, Any]) -> usr_models.User:
        """
        토큰 소유자 본인의 프로필을 부분 수정합니다.
        변경할 이메일은 자기 자신을 제외하고 대소문자 무시로 중복 검사합니다.
        """
        await self.get_or_404(db, auth.user_id)

        new_email = changes.get("email")
        if new_email is not None and await self.email_taken(db, email=new_email, exclude_user_id=auth.user_id):
            raise Conflict(EMAIL_EXISTS)

        return await self.execute_update(db, self.update_builder(auth.user_id).set_many(changes))


user = CRUDUser()
