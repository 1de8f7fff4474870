# staffdesk/domains/usr/routers.py

"""
'usr' 도메인 (인증 및 사용자 프로필)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core import dependencies as deps
from staffdesk.core.security import create_access_token
from staffdesk.core.validation import json_payload

# usr 도메인의 CRUD, 스키마
from . import crud as usr_crud
from . import schemas as usr_schemas


# 라우터 인스턴스 생성 (prefix는 main.py에서 관리)
router = APIRouter(
    tags=["User (인증 및 사용자 프로필)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================
@router.post("/auth", response_model=usr_schemas.AuthResponse, summary="가입 또는 로그인")
async def authenticate(
    response: Response,
    payload: usr_schemas.AuthRequest = Depends(json_payload(usr_schemas.AuthRequest, authenticated=False)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """
    action=create: 새 계정을 만들고 토큰을 발급합니다 (201).
    action=login: 자격 증명을 확인하고 토큰을 발급합니다 (200).
    """
    if payload.action == usr_schemas.AuthAction.CREATE:
        db_user = await usr_crud.user.create(db, email=payload.email, password=payload.password)
        response.status_code = status.HTTP_201_CREATED
    else:
        db_user = await usr_crud.user.authenticate(db, email=payload.email, password=payload.password)

    return usr_schemas.AuthResponse(email=db_user.email, token=create_access_token(str(db_user.user_id)))


# =============================================================================
# 2. 사용자 프로필 엔드포인트
# =============================================================================
@router.get("/user", response_model=usr_schemas.UserProfile, summary="내 프로필 조회")
async def read_profile(
    auth: deps.AuthContext = Depends(deps.get_auth_context),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return await usr_crud.user.get_or_404(db, auth.user_id)


@router.patch("/user", response_model=usr_schemas.UserProfile, summary="내 프로필 수정")
async def update_profile(
    auth: deps.AuthContext = Depends(deps.get_auth_context),
    payload: usr_schemas.UserProfileUpdate = Depends(json_payload(usr_schemas.UserProfileUpdate)),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """요청에 포함된 필드만 변경합니다. 빈 요청은 400."""
    return await usr_crud.user.update_profile(db, auth=auth, changes=payload.changes())
