# staffdesk/domains/shared/routers.py

"""
'shared' 도메인 (파일 업로드)의 API 엔드포인트를 정의하는 모듈입니다.
"""

from fastapi import APIRouter, Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from staffdesk.core import dependencies as deps
from staffdesk.utils.files import ObjectStorage, get_object_storage

from . import schemas as shared_schemas
from . import services as shared_services


router = APIRouter(
    tags=["Shared (파일 업로드)"],
    responses={404: {"description": "Not found"}},
)


@router.post("/file", response_model=shared_schemas.FileRead, summary="이미지 업로드")
async def upload_file(
    request: Request,
    auth: deps.AuthContext = Depends(deps.get_auth_context),
    db: AsyncSession = Depends(deps.get_db_session),
    storage: ObjectStorage = Depends(get_object_storage),
):
    """
    PNG 또는 JPEG 이미지를 업로드합니다 (최대 100KiB).
    본문은 원시 바이트이거나 multipart/form-data의 `file` 필드입니다.
    """
    return await shared_services.upload_image(db, auth=auth, request=request, storage=storage)
