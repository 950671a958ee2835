# 사용자 저장소 레이어
# - 데이터 접근(조회/생성/수정)만 담당 (서비스 로직 분리)
# - 채널 상세 / 시청 기록 집계 파이프라인 포함

from typing import List, Optional

from beanie import PydanticObjectId
from beanie.operators import Or

from ..models.user import User
from ..models.video import Video

USERS_COLLECTION = "users"
SUBSCRIPTIONS_COLLECTION = "subscriptions"

def channel_profile_pipeline(username: str, viewer_id: Optional[PydanticObjectId]) -> List[dict]:
    """채널 상세 집계 파이프라인

    subscriptions 컬렉션을 두 번 조인합니다.
    - channel == 이 사용자  -> 구독자 목록
    - subscriber == 이 사용자 -> 이 사용자가 구독한 채널 목록
    """
    if viewer_id is None:
        is_subscribed = False
    else:
        is_subscribed = {
            "$gt": [
                {"$size": {"$filter": {
                    "input": "$subscribers",
                    "as": "sub",
                    "cond": {"$eq": ["$$sub.subscriber", viewer_id]},
                }}},
                0,
            ]
        }
    return [
        {"$match": {"username": username.strip().lower()}},
        {"$lookup": {
            "from": SUBSCRIPTIONS_COLLECTION,
            "localField": "_id",
            "foreignField": "channel",
            "as": "subscribers",
        }},
        {"$lookup": {
            "from": SUBSCRIPTIONS_COLLECTION,
            "localField": "_id",
            "foreignField": "subscriber",
            "as": "subscribed_to",
        }},
        {"$addFields": {
            "subscribers_count": {"$size": "$subscribers"},
            "channels_subscribed_to_count": {"$size": "$subscribed_to"},
            "is_subscribed": is_subscribed,
        }},
        {"$project": {
            "_id": 1,
            "username": 1,
            "email": 1,
            "full_name": 1,
            "avatar": 1,
            "cover_image": 1,
            "subscribers_count": 1,
            "channels_subscribed_to_count": 1,
            "is_subscribed": 1,
        }},
    ]

def watch_history_pipeline(video_ids: List[PydanticObjectId]) -> List[dict]:
    # videos -> users(owner) 조인, owner는 공개 필드만 남깁니다.
    return [
        {"$match": {"_id": {"$in": list(video_ids)}}},
        {"$lookup": {
            "from": USERS_COLLECTION,
            "localField": "owner",
            "foreignField": "_id",
            "as": "owner",
        }},
        {"$unwind": {"path": "$owner", "preserveNullAndEmptyArrays": True}},
        {"$project": {
            "_id": 1,
            "title": 1,
            "description": 1,
            "duration": 1,
            "views": 1,
            "video_file": 1,
            "thumbnail": 1,
            "created_at": 1,
            "owner._id": 1,
            "owner.username": 1,
            "owner.full_name": 1,
            "owner.avatar": 1,
        }},
    ]

def order_by_history(video_ids: List[PydanticObjectId], videos: List[dict]) -> List[dict]:
    # $match/$in 결과는 순서를 보장하지 않으므로 시청 기록 순서대로 다시 정렬
    by_id = {str(video["_id"]): video for video in videos}
    return [by_id[str(vid)] for vid in video_ids if str(vid) in by_id]

class UserRepository:
    async def get(self, user_id: PydanticObjectId) -> Optional[User]:
        return await User.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await User.find_one(User.username == username.strip().lower())

    async def get_by_email(self, email: str) -> Optional[User]:
        return await User.find_one(User.email == email.strip().lower())

    async def get_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        return await User.find_one(
            Or(User.username == username.strip().lower(), User.email == email.strip().lower())
        )

    async def create(self, user: User) -> User:
        return await user.insert()

    async def save(self, user: User) -> User:
        return await user.save()

    async def set_refresh_token(self, user: User, refresh_token: Optional[str]) -> User:
        user.refresh_token = refresh_token
        return await user.save()

    async def channel_profile(self, username: str, viewer_id: Optional[PydanticObjectId]) -> Optional[dict]:
        rows = await User.aggregate(channel_profile_pipeline(username, viewer_id)).to_list()
        return rows[0] if rows else None

    async def watch_history(self, user: User) -> List[dict]:
        if not user.watch_history:
            return []
        videos = await Video.aggregate(watch_history_pipeline(user.watch_history)).to_list()
        return order_by_history(user.watch_history, videos)
