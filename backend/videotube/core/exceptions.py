# 커스텀 예외 + 공통 에러 응답
# 주니어 개발자님께: 모든 핸들러는 실패 시 ApiError 하나만 던집니다.
# 상태 코드와 메시지를 담고 있고, 아래 register_exception_handlers가
# 응답 형식을 {statusCode, message, success, errors, stack}으로 통일합니다.

import logging
import traceback
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """API 요청 처리 중 발생하는 단일 예외 타입

    Attributes:
        status_code: HTTP 상태 코드
        message: 사용자에게 보여줄 에러 메시지
        errors: 세부 에러 목록 (검증 실패 필드 등)
    """
    def __init__(self, status_code: int, message: str = "Something went wrong", errors: Optional[List[str]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        self.data = None
        self.success = False
        super().__init__(message)


def _stack_of(exc: Exception) -> str:
    # 개발 환경에서만 스택을 노출합니다.
    if not settings.is_development:
        return ""
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def error_response(status_code: int, message: str, errors: Optional[List[str]] = None, exc: Optional[Exception] = None) -> JSONResponse:
    content = {
        "statusCode": status_code,
        "message": message,
        "success": False,
        "errors": errors or [],
        "stack": _stack_of(exc) if exc is not None else "",
    }
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn("[%s %s] %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return error_response(exc.status_code, exc.message, exc.errors, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        logger.warning("[%s %s] %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        response = error_response(exc.status_code, str(exc.detail), exc=exc)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        ]
        logger.warning("[%s %s] validation failed: %s", request.method, request.url.path, errors)
        return error_response(400, "Invalid request payload", errors, exc)

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate_key(request: Request, exc: DuplicateKeyError):
        # 동시 가입 등 애플리케이션 체크를 통과한 중복은 DB unique 인덱스가 막습니다.
        logger.warning("[%s %s] duplicate key: %s", request.method, request.url.path, exc.details)
        return error_response(409, "User with email or username already exists", exc=exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("[%s %s] unhandled error", request.method, request.url.path)
        return error_response(500, "Internal server error", exc=exc)
