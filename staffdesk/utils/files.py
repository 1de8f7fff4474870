# staffdesk/utils/files.py

"""
업로드 이미지의 형식 판별과 저장을 담당하는 유틸리티 모듈입니다.

- 형식은 클라이언트가 보낸 Content-Type이나 파일명이 아니라 파일 앞부분의 시그니처(매직 바이트)로 판별합니다.
- 저장은 `ObjectStorage` 인터페이스 뒤에 숨기며, 기본 구현은 로컬 디렉토리(aiofiles)입니다.
"""

import enum
import logging
from pathlib import Path
from typing import Optional, Protocol

import aiofiles
import aiofiles.os

from staffdesk.core.config import settings
from staffdesk.core.exceptions import StorageError

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"  # SOI 마커 + 다음 마커의 첫 바이트 (JFIF/EXIF 등 모든 변형)


class ImageType(enum.Enum):
    PNG = ("png", "image/png")
    JPEG = ("jpg", "image/jpeg")

    @property
    def extension(self) -> str:
        return self.value[0]

    @property
    def content_type(self) -> str:
        return self.value[1]


def sniff_image_type(data: bytes) -> Optional[ImageType]:
    """파일 시그니처로 이미지 형식을 판별합니다. 허용 형식이 아니면 None."""
    if data.startswith(PNG_SIGNATURE):
        return ImageType.PNG
    if data.startswith(JPEG_SIGNATURE):
        return ImageType.JPEG
    return None


class ObjectStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """데이터를 key로 저장하고 공개 URI를 반환합니다."""
        ...

    async def delete(self, key: str) -> None:
        """저장된 key를 삭제합니다. 없으면 아무 일도 하지 않습니다."""
        ...


class LocalObjectStorage:
    """
    UPLOAD_DIR 아래에 파일을 쓰고 `UPLOAD_BASE_URL/<key>` 형태의 URI를 돌려주는 저장소입니다.
    """

    def __init__(self, root: str, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self.root / key
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(data)
        except OSError as e:
            logger.error("Failed to write upload %s: %s", path, e)
            raise StorageError("Failed to store file") from e
        logger.info("Stored %s (%d bytes, %s)", key, len(data), content_type)
        return f"{self.base_url}/{key}"

    async def delete(self, key: str) -> None:
        path = self.root / key
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error("Failed to delete upload %s: %s", path, e)
            raise StorageError("Failed to delete file") from e
        logger.info("Deleted %s", key)


def get_object_storage() -> ObjectStorage:
    """
    FastAPI 의존성으로 사용하는 저장소 팩토리입니다.
    설정값을 호출 시점에 읽으므로 테스트에서 monkeypatch한 UPLOAD_DIR이 반영됩니다.
    """
    return LocalObjectStorage(settings.UPLOAD_DIR, settings.UPLOAD_BASE_URL)
