# 업로드 임시 파일 / 미디어 서비스 테스트
import asyncio
import io
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi import UploadFile

from videotube.core.exceptions import ApiError
from videotube.services import media_service
from videotube.utils.uploads import stage_uploads

def _upload(name, content=b"data"):
    return UploadFile(file=io.BytesIO(content), filename=name)

def test_stage_uploads_removes_files_after_block():
    async def _run():
        async with stage_uploads(_upload("a.png", b"abc"), None) as (a_path, missing):
            assert missing is None
            assert Path(a_path).read_bytes() == b"abc"
            assert a_path.endswith(".png")
            return a_path
    path = asyncio.run(_run())
    assert not Path(path).exists()

def test_stage_uploads_removes_files_when_body_fails():
    staged = []

    async def _run():
        async with stage_uploads(_upload("a.jpg")) as (a_path,):
            staged.append(a_path)
            raise ApiError(400, "boom")

    with pytest.raises(ApiError):
        asyncio.run(_run())
    assert staged and not Path(staged[0]).exists()

@patch("cloudinary.uploader.upload", return_value={"public_id": "pid-1", "secure_url": "https://cdn/x.png"})
def test_upload_media_returns_asset(mock_upload):
    asset = asyncio.run(media_service.upload_media("/tmp/x.png"))
    assert asset.url == "https://cdn/x.png"
    assert asset.public_id == "pid-1"
    mock_upload.assert_called_once_with("/tmp/x.png", resource_type="auto")

def test_upload_media_without_path_is_noop():
    assert asyncio.run(media_service.upload_media(None)) is None
    assert asyncio.run(media_service.delete_media("")) is None

@patch("cloudinary.uploader.upload", side_effect=RuntimeError("quota exceeded"))
def test_upload_media_failure_becomes_api_error(mock_upload):
    with pytest.raises(ApiError) as exc:
        asyncio.run(media_service.upload_media("/tmp/x.png"))
    assert exc.value.status_code == 400
    assert exc.value.message == "quota exceeded"

@patch("cloudinary.uploader.destroy", side_effect=RuntimeError("network down"))
def test_delete_media_quietly_does_not_raise(mock_destroy):
    asyncio.run(media_service.delete_media_quietly("pid-1"))
    mock_destroy.assert_called_once_with("pid-1")
