# 요청/응답 스키마 정의 (Pydantic 모델)
# - 응답 필드는 camelCase (fullName, coverImage ...)
# - UserPublic에는 password / refresh_token 필드 자체가 없습니다

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from ..core.exceptions import ApiError
from ..models.user import MediaAsset, User

_email_adapter = TypeAdapter(EmailStr)


def validate_email_address(value: str) -> str:
    # 형식이 잘못된 이메일은 400으로 거절합니다.
    try:
        return _email_adapter.validate_python(value.strip().lower())
    except ValidationError as e:
        raise ApiError(400, "Invalid email address") from e


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""


class ChangePasswordRequest(CamelModel):
    old_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


class UpdateAccountRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None


class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None


class UserPublic(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: MediaAsset
    cover_image: Optional[MediaAsset] = None
    watch_history: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(
            id=str(user.id),
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            watch_history=[str(v) for v in user.watch_history],
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str


class LoginResult(TokenPair):
    user: UserPublic


class ChannelProfile(CamelModel):
    id: str
    username: str
    email: str
    full_name: str
    avatar: MediaAsset
    cover_image: Optional[MediaAsset] = None
    subscribers_count: int = 0
    channels_subscribed_to_count: int = 0
    is_subscribed: bool = False

    @classmethod
    def from_row(cls, row: dict) -> "ChannelProfile":
        return cls(id=str(row["_id"]), **{k: v for k, v in row.items() if k != "_id"})


class VideoOwner(CamelModel):
    id: str
    username: str
    full_name: str
    avatar: Optional[MediaAsset] = None


class WatchedVideo(CamelModel):
    id: str
    title: str
    description: str = ""
    duration: float = 0
    views: int = 0
    video_file: MediaAsset
    thumbnail: MediaAsset
    created_at: Optional[datetime] = None
    owner: Optional[VideoOwner] = None

    @classmethod
    def from_row(cls, row: dict) -> "WatchedVideo":
        data: dict[str, Any] = {k: v for k, v in row.items() if k not in ("_id", "owner")}
        owner = row.get("owner")
        if owner:
            data["owner"] = VideoOwner(id=str(owner["_id"]), **{k: v for k, v in owner.items() if k != "_id"})
        return cls(id=str(row["_id"]), **data)
