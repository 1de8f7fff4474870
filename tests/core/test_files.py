# tests/core/test_files.py

"""
이미지 형식 판별과 로컬 저장소 단위 테스트입니다.
"""

import pytest

from staffdesk.utils.files import ImageType, LocalObjectStorage, sniff_image_type

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


@pytest.mark.parametrize(
    "data, expected",
    [
        (PNG_HEADER + b"\x00" * 16, ImageType.PNG),
        (b"\xff\xd8\xff\xe0\x00\x10JFIF", ImageType.JPEG),
        (b"\xff\xd8\xff\xe1\x00\x10Exif", ImageType.JPEG),
        (b"\xff\xd8\xff\xdb\x00\x43", ImageType.JPEG),
        (b"GIF89a", None),
        (b"%PDF-1.7", None),
        (b"\x89PNG", None),
        (b"", None),
    ],
)
def test_sniff_image_type(data: bytes, expected):
    assert sniff_image_type(data) is expected


def test_image_type_metadata():
    assert ImageType.PNG.extension == "png"
    assert ImageType.JPEG.extension == "jpg"
    assert ImageType.JPEG.content_type == "image/jpeg"


@pytest.mark.asyncio
async def test_local_storage_writes_file_and_returns_uri(tmp_path):
    storage = LocalObjectStorage(str(tmp_path / "store"), "http://cdn.test/files/")
    uri = await storage.put("abc.png", PNG_HEADER, "image/png")
    assert uri == "http://cdn.test/files/abc.png"
    assert (tmp_path / "store" / "abc.png").read_bytes() == PNG_HEADER


@pytest.mark.asyncio
async def test_local_storage_delete_removes_file_and_ignores_missing(tmp_path):
    storage = LocalObjectStorage(str(tmp_path), "http://cdn.test/files")
    await storage.put("abc.png", PNG_HEADER, "image/png")

    await storage.delete("abc.png")
    assert not (tmp_path / "abc.png").exists()

    await storage.delete("abc.png")
