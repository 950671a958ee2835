# 사용자 프로필 서비스 레이어
# - 계정 정보(이름/이메일) 수정
# - 아바타 / 커버 이미지 교체 (새 파일 업로드 -> DB 반영 -> 이전 파일 삭제)
# - 채널 상세, 시청 기록 조회

import logging
from typing import List, Optional

from fastapi import Depends, status

from ..core.exceptions import ApiError
from ..models.user import User
from ..repositories.user_repository import UserRepository
from ..schemas.user_schema import ChannelProfile, WatchedVideo, validate_email_address
from .media_service import delete_media_quietly, upload_media

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def update_account(self, user: User, full_name: Optional[str], email: Optional[str]) -> User:
        full_name = (full_name or "").strip()
        email = (email or "").strip().lower()
        if not full_name and not email:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "At least one of fullName or email is required")
        if email:
            email = validate_email_address(email)

        if email and email != user.email:
            other = await self.repo.get_by_email(email)
            if other and other.id != user.id:
                raise ApiError(status.HTTP_409_CONFLICT, "Email is already in use")
            user.email = email
        if full_name:
            user.full_name = full_name
        return await self.repo.save(user)

    async def update_avatar(self, user: User, avatar_path: Optional[str]) -> User:
        return await self._replace_media(user, "avatar", avatar_path, "Avatar")

    async def update_cover_image(self, user: User, cover_image_path: Optional[str]) -> User:
        return await self._replace_media(user, "cover_image", cover_image_path, "Cover image")

    async def _replace_media(self, user: User, field: str, local_path: Optional[str], label: str) -> User:
        if not local_path:
            raise ApiError(status.HTTP_400_BAD_REQUEST, f"{label} file is missing")

        asset = await upload_media(local_path)
        if not asset or not asset.url:
            raise ApiError(status.HTTP_400_BAD_REQUEST, f"Error while uploading {label.lower()}")

        previous = getattr(user, field)
        setattr(user, field, asset)
        user = await self.repo.save(user)

        # 새 파일이 저장된 뒤에만 이전 파일을 지웁니다. 실패해도 롤백하지 않습니다.
        if previous:
            await delete_media_quietly(previous.public_id)
        return user

    async def channel_details(self, username: str, viewer: Optional[User]) -> ChannelProfile:
        if not username or not username.strip():
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Username is missing")
        row = await self.repo.channel_profile(username, viewer.id if viewer else None)
        if not row:
            raise ApiError(status.HTTP_404_NOT_FOUND, "Channel does not exist")
        return ChannelProfile.from_row(row)

    async def watch_history(self, user: User) -> List[WatchedVideo]:
        rows = await self.repo.watch_history(user)
        return [WatchedVideo.from_row(row) for row in rows]


def get_user_service(repo: UserRepository = Depends(UserRepository)) -> UserService:
    return UserService(repo)
