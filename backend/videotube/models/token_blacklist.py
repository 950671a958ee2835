# 로그아웃된 access 토큰 저장소
# - 만료 전에 무효화된 토큰을 기록
# - created_at TTL 인덱스로 일정 시간이 지나면 MongoDB가 자동 삭제

from datetime import datetime

import pymongo
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel

from ..core.config import settings
from .user import utcnow


class TokenBlacklist(Document):
    token: Indexed(str)
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "token_blacklist"
        indexes = [
            IndexModel(
                [("created_at", pymongo.ASCENDING)],
                expireAfterSeconds=settings.TOKEN_BLACKLIST_TTL_SECONDS,
            ),
        ]
