# 인증 서비스 레이어
# - 회원가입 (필수값 체크, username/email 중복 체크, 아바타 업로드)
# - 로그인 (비밀번호 검증, JWT 토큰 발급, refresh 토큰 저장)
# - 로그아웃 (access 토큰 블랙리스트 등록, refresh 토큰 제거)
# - 토큰 재발급, 비밀번호 변경

import logging
from typing import List, Optional, Tuple

from fastapi import Depends, status

from ..core.exceptions import ApiError
from ..core.security import (
    decode_refresh_token,
    generate_tokens,
    get_password_hash,
    to_object_id,
)
from ..models.user import MediaAsset, User
from ..repositories.token_blacklist_repository import TokenBlacklistRepository
from ..repositories.user_repository import UserRepository
from ..schemas.user_schema import validate_email_address
from .media_service import delete_media_quietly, upload_media

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class AuthService:
    def __init__(self, repo: UserRepository, blacklist: TokenBlacklistRepository):
        self.repo = repo
        self.blacklist = blacklist

    async def register(
        self,
        username: str,
        email: str,
        full_name: str,
        password: str,
        avatar_path: Optional[str],
        cover_image_path: Optional[str] = None,
    ) -> User:
        if any(_is_blank(v) for v in (username, email, full_name, password)):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required")
        email = validate_email_address(email)

        existing = await self.repo.get_by_username_or_email(username, email)
        if existing:
            raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")

        if not avatar_path:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar file is required")

        # 업로드에 성공한 파일은 이후 단계(커버 업로드, DB 저장)가 실패하면 모두 정리합니다.
        uploaded: List[MediaAsset] = []
        try:
            avatar = await upload_media(avatar_path)
            if not avatar:
                raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar file is required")
            uploaded.append(avatar)
            cover_image = await upload_media(cover_image_path)
            if cover_image:
                uploaded.append(cover_image)

            user = User(
                username=username,
                email=email,
                full_name=full_name,
                avatar=avatar,
                cover_image=cover_image,
                password=get_password_hash(password),
            )
            user = await self.repo.create(user)
        except Exception:
            for asset in uploaded:
                await delete_media_quietly(asset.public_id)
            raise
        logger.info("registered user %s (%s)", user.username, user.id)
        return user

    async def login(self, username: str, password: str) -> Tuple[User, str, str]:
        if _is_blank(username) or _is_blank(password):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Username and password are required")

        user = await self.repo.get_by_username(username)
        if not user:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "User does not exist")
        if not user.is_valid_password(password):
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid user credentials")

        access, refresh = generate_tokens(user)
        user = await self.repo.set_refresh_token(user, refresh)
        logger.info("user %s logged in", user.username)
        return user, access, refresh

    async def logout(self, user: Optional[User], access_token: Optional[str]) -> None:
        if not user:
            raise ApiError(status.HTTP_404_NOT_FOUND, "User not found")
        if access_token:
            await self.blacklist.add(access_token)
        await self.repo.set_refresh_token(user, None)
        logger.info("user %s logged out", user.username)

    async def refresh(self, incoming_token: Optional[str]) -> Tuple[User, str]:
        if not incoming_token:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

        payload = decode_refresh_token(incoming_token)
        user_id = to_object_id(payload["_id"])
        user = await self.repo.get(user_id) if user_id else None
        if not user:
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid refresh token")

        # 저장된 토큰과 다르면 로그아웃 이후 재사용된 토큰입니다.
        if user.refresh_token != incoming_token:
            logger.warning("refresh token reuse detected for user %s", user.id)
            raise ApiError(status.HTTP_401_UNAUTHORIZED, "Refresh token is expired or used")

        return user, user.generate_access_token()

    async def change_password(self, user: User, old_password: str, new_password: str, confirm_password: str) -> None:
        if any(_is_blank(v) for v in (old_password, new_password, confirm_password)):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required")
        if not user.is_valid_password(old_password):
            raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid old password")
        if new_password == old_password:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "New password must be different from the old password")
        if new_password != confirm_password:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "New password and confirm password do not match")

        user.password = get_password_hash(new_password)
        await self.repo.save(user)
        logger.info("user %s changed password", user.username)


def get_auth_service(
    repo: UserRepository = Depends(UserRepository),
    blacklist: TokenBlacklistRepository = Depends(TokenBlacklistRepository),
) -> AuthService:
    return AuthService(repo, blacklist)
