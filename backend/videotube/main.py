# FastAPI 진입점
# - Beanie ODM 초기화 (MongoDB)
# - Cloudinary 설정
# - 라우터 라우팅, 공통 에러 핸들러
# - CORS / 정적 파일 설정

import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.exceptions import register_exception_handlers
from .db import connect_db
from .services.media_service import configure_cloudinary
from .api.v1.users import router as users_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# FastAPI 애플리케이션 인스턴스 생성
app = FastAPI(
    title="VideoTube User API",
    description="회원가입/로그인/프로필/구독/시청 기록 API",
    version="1.0.0"
)

# CORS 허용 도메인 세팅 (쿠키 전송을 위해 credentials 허용)
origins = [o.strip() for o in settings.CORS_ORIGIN.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

Path(settings.STATIC_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

@app.on_event("startup")
async def app_init():
    configure_cloudinary()
    await connect_db()
    logger.info("%s started (env=%s)", settings.APP_NAME, settings.ENV)

# 간단한 헬스체크
@app.get("/")
async def root():
    return {"ok": True, "app": settings.APP_NAME, "time": datetime.now(tz=timezone.utc).isoformat()}

@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}

# API v1 라우터 등록
app.include_router(users_router, prefix="/api/v1")
