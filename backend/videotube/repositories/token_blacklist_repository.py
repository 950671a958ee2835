# 토큰 블랙리스트 저장소 레이어
# - 로그아웃 시 access 토큰 등록, 인증 시 존재 여부 확인

from ..models.token_blacklist import TokenBlacklist

class TokenBlacklistRepository:
    async def add(self, token: str) -> TokenBlacklist:
        return await TokenBlacklist(token=token).insert()

    async def contains(self, token: str) -> bool:
        return await TokenBlacklist.find_one(TokenBlacklist.token == token) is not None
