# MongoDB 연결 + Beanie 초기화
# - 앱 시작 시 1회 호출
# - 테스트에서는 client 인자로 mongomock 클라이언트를 넘겨줍니다

import logging
from typing import Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from .core.config import settings
from .models.subscription import Subscription
from .models.token_blacklist import TokenBlacklist
from .models.user import User
from .models.video import Video

logger = logging.getLogger(__name__)

DOCUMENT_MODELS = [User, TokenBlacklist, Subscription, Video]


async def connect_db(client: Optional[AsyncIOMotorClient] = None) -> AsyncIOMotorClient:
    if client is None:
        # 주니어 개발자님께: serverSelectionTimeoutMS 안에 서버를 찾지 못하면 ping이 실패합니다.
        client = AsyncIOMotorClient(settings.MONGODB_URI, serverSelectionTimeoutMS=5000)
        try:
            await client.admin.command("ping")
        except Exception:
            logger.exception("MongoDB 연결 실패: %s", settings.MONGODB_URI)
            raise

    await init_beanie(database=client[settings.MONGODB_DB_NAME], document_models=DOCUMENT_MODELS)
    logger.info("MongoDB 연결 성공: %s/%s", settings.MONGODB_URI, settings.MONGODB_DB_NAME)
    return client
