# 채널 구독 모델
# - subscriber(구독한 사용자) -> channel(구독 대상 사용자) 간선
# - 채널 상세 집계에서 두 방향으로 조인됩니다

from datetime import datetime

from beanie import Document, PydanticObjectId
from pydantic import Field

from .user import utcnow


class Subscription(Document):
    subscriber: PydanticObjectId
    channel: PydanticObjectId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "subscriptions"
