# 미디어 저장소 서비스 (Cloudinary)
# - 로컬에 임시 저장된 파일을 클라우드로 업로드하고 URL + public_id 반환
# - public_id로 이전 파일 삭제
# 주니어 개발자님께: cloudinary SDK는 동기(blocking) 라이브러리라서
# 이벤트 루프를 막지 않도록 스레드풀에서 실행합니다. 재시도는 하지 않습니다.

import logging
from typing import Optional

import cloudinary
import cloudinary.uploader
from fastapi.concurrency import run_in_threadpool

from ..core.config import settings
from ..core.exceptions import ApiError
from ..models.user import MediaAsset

logger = logging.getLogger(__name__)


def configure_cloudinary() -> None:
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


async def upload_media(local_file_path: Optional[str]) -> Optional[MediaAsset]:
    if not local_file_path:
        return None
    try:
        response = await run_in_threadpool(
            cloudinary.uploader.upload, local_file_path, resource_type="auto"
        )
    except Exception as e:
        logger.error("[cloudinary] upload failed for %s: %s", local_file_path, e)
        raise ApiError(400, str(e) or "Something went wrong while uploading on cloudinary") from e

    url = response.get("secure_url") or response.get("url")
    logger.info("[cloudinary] uploaded %s -> %s", local_file_path, response.get("public_id"))
    return MediaAsset(url=url, public_id=response["public_id"])


async def delete_media(public_id: Optional[str]) -> Optional[dict]:
    if not public_id:
        return None
    try:
        response = await run_in_threadpool(cloudinary.uploader.destroy, public_id)
    except Exception as e:
        logger.error("[cloudinary] delete failed for %s: %s", public_id, e)
        raise ApiError(400, str(e) or "Something went wrong while deleting from cloudinary") from e
    logger.info("[cloudinary] deleted %s: %s", public_id, response.get("result"))
    return response


async def delete_media_quietly(public_id: Optional[str]) -> None:
    # 이미 DB 반영이 끝난 뒤의 정리 작업이라 실패해도 요청은 성공으로 처리
    try:
        await delete_media(public_id)
    except ApiError as e:
        logger.warning("[cloudinary] could not remove old asset %s: %s", public_id, e.message)
