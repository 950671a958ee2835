# User 도메인 모델 (Beanie Document)
# - username/email은 unique 인덱스 (소문자, 공백 제거 후 저장)
# - password는 bcrypt 해시만 저장, 응답에는 절대 포함하지 않음
# - refresh_token은 로그인 시 저장, 로그아웃 시 None

from datetime import datetime, timezone
from typing import List, Optional

from beanie import Document, Indexed, PydanticObjectId, Insert, Replace, Save, before_event
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class MediaAsset(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # 클라우드에 올라간 파일의 공개 URL과, 삭제할 때 필요한 public_id
    url: str
    public_id: str


class User(Document):
    username: Indexed(str, unique=True)
    email: Indexed(EmailStr, unique=True)  # 중복 방지 인덱스
    full_name: Indexed(str)
    avatar: MediaAsset
    cover_image: Optional[MediaAsset] = None
    password: str = Field(repr=False)
    refresh_token: Optional[str] = Field(default=None, repr=False)
    watch_history: List[PydanticObjectId] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("username", "email", mode="before")
    @classmethod
    def _normalize_identity(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("full_name", mode="before")
    @classmethod
    def _strip_full_name(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    # security 모듈이 User를 import하므로 메서드 안에서 런타임 import 합니다.
    def is_valid_password(self, password: str) -> bool:
        from ..core import security
        return security.verify_password(password, self.password)

    def generate_access_token(self) -> str:
        from ..core import security
        return security.create_access_token(self)

    def generate_refresh_token(self) -> str:
        from ..core import security
        return security.create_refresh_token(str(self.id))

    @before_event(Insert, Replace, Save)
    def touch(self):
        self.updated_at = utcnow()

    class Settings:
        name = "users"  # 컬렉션명
