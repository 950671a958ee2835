# 설정 모듈
# - .env 값들을 한 곳에서 관리
# - 기본값을 제공하여 로컬 실행 편의성 확보

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from pydantic import Field

# 프로젝트 루트 디렉토리 경로 찾기
# 주니어 개발자님께: 이 파일은 backend/videotube/core/config.py에 있으므로,
# 3단계 상위로 올라가면 프로젝트 루트가 됩니다.
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / ".env"

class Settings(BaseSettings):
    APP_NAME: str = "videotube"
    ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "videotube"

    # Access / Refresh 토큰은 서로 다른 비밀키로 서명합니다.
    ACCESS_TOKEN_SECRET: str = Field(..., description="Access 토큰 서명용 비밀키. 반드시 강력한 랜덤 문자열로 설정하세요.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_SECRET: str = Field(..., description="Refresh 토큰 서명용 비밀키. Access 키와 다른 값을 사용하세요.")
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    JWT_ALGORITHM: str = "HS256"

    # bcrypt cost. 테스트에서는 낮춰서 속도를 확보합니다.
    PASSWORD_HASH_ROUNDS: int = 12

    CORS_ORIGIN: str = "http://localhost:5173,http://localhost:3000"

    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = "lax"

    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # multipart 업로드 파일을 클라우드로 옮기기 전 임시로 저장하는 위치
    UPLOAD_TEMP_DIR: str = "./public/temp"
    STATIC_DIR: str = "./public"

    # 로그아웃된 access 토큰 보관 기간 (초). MongoDB TTL 인덱스로 자동 삭제됩니다.
    TOKEN_BLACKLIST_TTL_SECONDS: int = 60 * 60 * 24

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH) if ENV_FILE_PATH.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.ENV in ("dev", "development")

settings = Settings()
