# 업로드 임시 파일 관리
# - multipart로 받은 파일을 UPLOAD_TEMP_DIR에 저장
# - 핸들러가 성공하든 실패하든 블록을 벗어나면 임시 파일 삭제

import logging
import os
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from ..core.config import settings

logger = logging.getLogger(__name__)


def _is_present(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


def _write_temp_file(upload: UploadFile, temp_dir: Path) -> str:
    suffix = Path(upload.filename).suffix
    path = temp_dir / f"{uuid.uuid4().hex}{suffix}"
    with open(path, "wb") as out:
        shutil.copyfileobj(upload.file, out)
    return str(path)


def cleanup_files(paths: List[Optional[str]]) -> None:
    for path in paths:
        if not path:
            continue
        try:
            os.unlink(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to delete file: %s (%s)", path, e)


@asynccontextmanager
async def stage_uploads(*uploads: Optional[UploadFile]) -> AsyncIterator[List[Optional[str]]]:
    """업로드 파일들을 로컬에 저장하고 경로 목록을 넘겨줍니다.

    파일이 없는 자리는 None 입니다. 예:
        async with stage_uploads(avatar, cover) as (avatar_path, cover_path):
            ...
    """
    temp_dir = Path(settings.UPLOAD_TEMP_DIR)
    temp_dir.mkdir(parents=True, exist_ok=True)
    paths: List[Optional[str]] = []
    try:
        for upload in uploads:
            if _is_present(upload):
                paths.append(await run_in_threadpool(_write_temp_file, upload, temp_dir))
            else:
                paths.append(None)
        yield paths
    finally:
        cleanup_files(paths)
