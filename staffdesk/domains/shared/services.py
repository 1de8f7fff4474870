# staffdesk/domains/shared/services.py

"""
이미지 업로드 서비스입니다.

요청 본문은 한 번에 읽지 않고 청크 단위로 세면서 받습니다.
누적 크기가 상한(MAX_UPLOAD_BYTES)을 넘는 순간 나머지를 읽지 않고 400으로 중단하며,
선언된 Content-Length가 이미 상한을 넘으면 본문을 읽지 않습니다.

본문 형식은 두 가지를 받습니다.
- 원시 바이트 (Content-Type 무관)
- multipart/form-data 의 `file` 필드
"""

import logging
import uuid
from typing import AsyncGenerator

from fastapi import Request
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser

from staffdesk.core.config import settings
from staffdesk.core.dependencies import AuthContext
from staffdesk.core.exceptions import BadRequest, StorageError
from staffdesk.domains.usr import crud as usr_crud
from staffdesk.utils.files import ObjectStorage, sniff_image_type
from . import crud as shared_crud
from . import models as shared_models

logger = logging.getLogger(__name__)

FILE_TOO_LARGE = "File size exceeds 100KiB limit"
UNSUPPORTED_TYPE = "Only JPEG, JPG, and PNG files are allowed"
FILE_MISSING = "File part is missing"

# multipart 경계/헤더에 허용하는 추가 바이트
MULTIPART_ENVELOPE_BYTES = 8 * 1024


def _check_declared_length(request: Request, ceiling: int) -> None:
    declared = request.headers.get("content-length")
    if declared is None:
        return
    try:
        length = int(declared)
    except ValueError as e:
        raise BadRequest("Invalid Content-Length header") from e
    if length > ceiling:
        raise BadRequest(FILE_TOO_LARGE)


async def _limited_stream(request: Request, ceiling: int) -> AsyncGenerator[bytes, None]:
    """본문 청크를 그대로 넘기되, 누적 크기가 ceiling을 넘으면 즉시 중단합니다."""
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > ceiling:
            logger.info("Upload aborted after %d bytes (limit %d)", received, ceiling)
            raise BadRequest(FILE_TOO_LARGE)
        yield chunk


async def _read_multipart_file(request: Request, limit: int) -> bytes:
    ceiling = limit + MULTIPART_ENVELOPE_BYTES
    _check_declared_length(request, ceiling)

    parser = MultiPartParser(request.headers, _limited_stream(request, ceiling), max_files=1, max_fields=4)
    try:
        form = await parser.parse()
    except MultiPartException as e:
        raise BadRequest("Invalid multipart body") from e

    try:
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise BadRequest(FILE_MISSING)
        data = await upload.read()
    finally:
        await form.close()

    if len(data) > limit:
        raise BadRequest(FILE_TOO_LARGE)
    return data


async def read_image_bytes(request: Request, limit: int) -> bytes:
    """요청 본문에서 업로드 파일의 바이트를 상한 내에서 읽습니다."""
    if request.headers.get("content-type", "").lower().startswith("multipart/form-data"):
        return await _read_multipart_file(request, limit)

    _check_declared_length(request, limit)
    buffer = bytearray()
    async for chunk in _limited_stream(request, limit):
        buffer.extend(chunk)
    return bytes(buffer)


async def _discard(storage: ObjectStorage, key: str) -> None:
    try:
        await storage.delete(key)
    except StorageError:
        logger.warning("Orphaned upload %s could not be removed", key)


async def upload_image(
    db: AsyncSession, *, auth: AuthContext, request: Request, storage: ObjectStorage,
) -> shared_models.File:
    """
    이미지를 검증/저장하고 업로드 기록을 남깁니다.

    1. 토큰 소유자의 사용자 행이 있어야 합니다 (없으면 404, 아무것도 저장하지 않음).
    2. 본문을 상한 내에서 읽습니다 (초과 400, 비어 있으면 400).
    3. 시그니처로 PNG/JPEG 여부를 판별합니다 (선언된 Content-Type은 무시, 그 외 400).
    4. ObjectStorage에 `<uuid>.<확장자>`로 저장하고 files 행을 추가합니다.
       행 추가가 실패하면 저장한 객체를 지우고 원래 오류를 그대로 냅니다.
    """
    await usr_crud.user.get_or_404(db, auth.user_id)

    data = await read_image_bytes(request, settings.MAX_UPLOAD_BYTES)
    if not data:
        raise BadRequest(FILE_MISSING)

    image_type = sniff_image_type(data)
    if image_type is None:
        raise BadRequest(UNSUPPORTED_TYPE)

    key = f"{uuid.uuid4()}.{image_type.extension}"
    uri = await storage.put(key, data, image_type.content_type)
    try:
        return await shared_crud.file.create(db, user_id=auth.user_id, uri=uri)
    except Exception:
        # 기록되지 않은 객체는 저장소에 남기지 않습니다.
        await _discard(storage, key)
        raise
