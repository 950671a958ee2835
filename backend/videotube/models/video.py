# 영상 모델
# - 사용자 시청 기록(watch_history)이 참조하는 컬렉션
# - 이 서비스에서는 시청 기록 조회 시 읽기만 합니다

from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field

from .user import MediaAsset, utcnow


class Video(Document):
    video_file: MediaAsset
    thumbnail: MediaAsset
    title: str
    description: str = ""
    duration: float = 0
    views: int = 0
    is_published: bool = True
    owner: PydanticObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "videos"
