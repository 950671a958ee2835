# 사용자 라우터 (prefix: /api/v1/users)
# - POST  /register        : 회원가입 (multipart, avatar 필수)
# - POST  /login           : 로그인 (쿠키 + 응답 본문으로 토큰 발급)
# - POST  /logout          : 로그아웃 (로그인 필요)
# - POST  /refresh-token   : access 토큰 재발급
# - POST  /change-password : 비밀번호 변경 (로그인 필요)
# - GET   /current-user    : 현재 사용자 (로그인 필요)
# - PATCH /update-account  : 이름/이메일 수정 (로그인 필요)
# - PATCH /avatar, /cover-image : 이미지 교체 (로그인 필요)
# - GET   /history         : 시청 기록 (로그인 필요)
# - GET   /c/{username}    : 채널 상세 (비로그인 허용)

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse

from ...core.config import settings
from ...core.security import (
    ACCESS_COOKIE,
    REFRESH_COOKIE,
    extract_token,
    get_current_user,
    get_optional_user,
    oauth2_scheme,
)
from ...models.user import User
from ...schemas.response import api_response
from ...schemas.user_schema import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResult,
    RefreshTokenRequest,
    TokenPair,
    UpdateAccountRequest,
    UserPublic,
)
from ...services.auth_service import AuthService, get_auth_service
from ...services.user_service import UserService, get_user_service
from ...utils.uploads import stage_uploads

router = APIRouter(prefix="/users", tags=["users"])


def _set_cookie(response: JSONResponse, key: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key,
        value,
        max_age=max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def _clear_cookie(response: JSONResponse, key: str) -> None:
    response.delete_cookie(
        key,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def _set_access_cookie(response: JSONResponse, token: str) -> None:
    _set_cookie(response, ACCESS_COOKIE, token, settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)


def _set_refresh_cookie(response: JSONResponse, token: str) -> None:
    _set_cookie(response, REFRESH_COOKIE, token, settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60)


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="회원가입 (username/email 중복 체크, 아바타 업로드)")
async def register(
    username: str = Form(""),
    email: str = Form(""),
    full_name: str = Form("", alias="fullName"),
    password: str = Form(""),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    service: AuthService = Depends(get_auth_service),
):
    # 임시 파일은 성공/실패와 관계없이 블록을 벗어나면 삭제됩니다.
    async with stage_uploads(avatar, cover_image) as (avatar_path, cover_image_path):
        user = await service.register(username, email, full_name, password, avatar_path, cover_image_path)
    return api_response(status.HTTP_201_CREATED, UserPublic.from_user(user), "User registered successfully")


@router.post("/login", summary="로그인 (JWT Access/Refresh 토큰 발급)")
async def login(payload: LoginRequest, service: AuthService = Depends(get_auth_service)):
    user, access, refresh = await service.login(payload.username, payload.password)
    result = LoginResult(access_token=access, refresh_token=refresh, user=UserPublic.from_user(user))
    response = api_response(status.HTTP_200_OK, result, "User logged in successfully")
    _set_access_cookie(response, access)
    _set_refresh_cookie(response, refresh)
    return response


@router.post("/logout", summary="로그아웃 (access 토큰 무효화)")
async def logout(
    request: Request,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.logout(user, getattr(request.state, "access_token", None))
    response = api_response(status.HTTP_200_OK, {}, "User logged out successfully")
    _clear_cookie(response, ACCESS_COOKIE)
    _clear_cookie(response, REFRESH_COOKIE)
    return response


@router.post("/refresh-token", summary="Refresh 토큰으로 Access 토큰 재발급")
async def refresh_access_token(
    request: Request,
    payload: Optional[RefreshTokenRequest] = None,
    bearer: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
):
    incoming = extract_token(request, REFRESH_COOKIE, bearer) or (payload.refresh_token if payload else None)
    user, access = await service.refresh(incoming)
    result = TokenPair(access_token=access, refresh_token=user.refresh_token)
    response = api_response(status.HTTP_200_OK, result, "Access token refreshed")
    _set_access_cookie(response, access)
    return response


@router.post("/change-password", summary="비밀번호 변경 (로그인 필요)")
async def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    await service.change_password(user, payload.old_password, payload.new_password, payload.confirm_password)
    return api_response(status.HTTP_200_OK, {}, "Password changed successfully")


@router.get("/current-user", summary="현재 로그인한 사용자")
async def current_user(user: User = Depends(get_current_user)):
    return api_response(status.HTTP_200_OK, UserPublic.from_user(user), "Current user fetched successfully")


@router.patch("/update-account", summary="이름/이메일 수정 (로그인 필요)")
async def update_account(
    payload: UpdateAccountRequest,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    user = await service.update_account(user, payload.full_name, payload.email)
    return api_response(status.HTTP_200_OK, UserPublic.from_user(user), "Account details updated successfully")


@router.patch("/avatar", summary="아바타 교체 (로그인 필요)")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    async with stage_uploads(avatar) as (avatar_path,):
        user = await service.update_avatar(user, avatar_path)
    return api_response(status.HTTP_200_OK, UserPublic.from_user(user), "Avatar updated successfully")


@router.patch("/cover-image", summary="커버 이미지 교체 (로그인 필요)")
async def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    async with stage_uploads(cover_image) as (cover_image_path,):
        user = await service.update_cover_image(user, cover_image_path)
    return api_response(status.HTTP_200_OK, UserPublic.from_user(user), "Cover image updated successfully")


@router.get("/history", summary="시청 기록 (로그인 필요)")
async def watch_history(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    videos = await service.watch_history(user)
    return api_response(status.HTTP_200_OK, videos, "Watch history fetched successfully")


@router.get("/c/{username}", summary="채널 상세 (구독자 수, 구독 여부)")
async def channel_details(
    username: str,
    viewer: Optional[User] = Depends(get_optional_user),
    service: UserService = Depends(get_user_service),
):
    channel = await service.channel_details(username, viewer)
    return api_response(status.HTTP_200_OK, channel, "Channel details fetched successfully")
