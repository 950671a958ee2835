# 보안/인증 유틸리티
# - 비밀번호 해싱/검증
# - JWT access/refresh 토큰 생성/검증
# - 현재 사용자 가져오기(의존성, 블랙리스트 확인 포함)

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from beanie import PydanticObjectId
from bson.errors import InvalidId
from fastapi import Depends, Request, status
from fastapi.security import OAuth2PasswordBearer
from passlib.context import CryptContext

from .config import settings
from .exceptions import ApiError
from ..models.user import User
from ..repositories.token_blacklist_repository import TokenBlacklistRepository

logger = logging.getLogger(__name__)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_HASH_ROUNDS,
)
# 쿠키로도 토큰을 받기 때문에 헤더가 없다고 바로 401을 던지지 않습니다.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_token(subject: dict, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "exp": now + expires_delta,
        "iat": now,
        "nbf": now,
        **subject,
    }
    return jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)

def create_access_token(user: User) -> str:
    subject = {
        "_id": str(user.id),
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "type": "access",
    }
    return create_token(subject, settings.ACCESS_TOKEN_SECRET, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

def create_refresh_token(user_id: str) -> str:
    return create_token(
        {"_id": str(user_id), "type": "refresh"},
        settings.REFRESH_TOKEN_SECRET,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )

def generate_tokens(user: User) -> Tuple[str, str]:
    try:
        return user.generate_access_token(), user.generate_refresh_token()
    except Exception as e:
        logger.exception("token generation failed for user %s", user.id)
        raise ApiError(500, "Something went wrong while generating tokens") from e

def _decode(token: str, secret: str, token_type: str, message: str) -> dict:
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, message) from e
    if payload.get("type") != token_type or not payload.get("_id"):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, message)
    return payload

def decode_access_token(token: str) -> dict:
    return _decode(token, settings.ACCESS_TOKEN_SECRET, "access", "Invalid Access Token")

def decode_refresh_token(token: str) -> dict:
    return _decode(token, settings.REFRESH_TOKEN_SECRET, "refresh", "Invalid refresh token")

def to_object_id(value: Optional[str]) -> Optional[PydanticObjectId]:
    # ObjectId(None)은 새 id를 만들어버리므로 먼저 걸러냅니다.
    if not value:
        return None
    try:
        return PydanticObjectId(value)
    except (InvalidId, TypeError):
        return None

def extract_token(request: Request, cookie_name: str, bearer: Optional[str]) -> Optional[str]:
    # 쿠키 우선, 없으면 Authorization: Bearer 헤더
    return request.cookies.get(cookie_name) or bearer

async def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    blacklist: TokenBlacklistRepository = Depends(TokenBlacklistRepository),
) -> User:
    token = extract_token(request, ACCESS_COOKIE, bearer)
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "No token, authorization denied")

    # 로그아웃된 토큰은 서명이 유효해도 거부합니다.
    if await blacklist.contains(token):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Token has been revoked")

    payload = decode_access_token(token)
    user_id = to_object_id(payload["_id"])
    user = await User.get(user_id) if user_id else None
    if not user:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid Access Token")

    request.state.access_token = token
    return user

async def get_optional_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    blacklist: TokenBlacklistRepository = Depends(TokenBlacklistRepository),
) -> Optional[User]:
    # 채널 상세처럼 비로그인 접근도 허용하는 라우트용
    try:
        return await get_current_user(request, bearer, blacklist)
    except ApiError:
        return None
