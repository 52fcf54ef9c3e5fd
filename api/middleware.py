"""
Middleware for the budget system API.
Provides CORS, request logging, security headers, error handling and the
exception handlers that map domain errors to HTTP responses.
"""

import time
from typing import Callable
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware

from utils import api_logger, config_manager
from utils.exceptions import BudgetError, ValidationError, NotFoundError, create_error_response


class LoggingMiddleware(BaseHTTPMiddleware):
    """日志中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        # 记录请求信息
        api_logger.info(f"[API] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            # 记录响应信息
            process_time = time.time() - start_time
            api_logger.info(
                f"[API] {request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s"
            )

            # 添加处理时间到响应头
            response.headers["X-Process-Time"] = f"{process_time:.6f}"
            return response

        except Exception as e:
            process_time = time.time() - start_time
            api_logger.error(f"[API] {request.method} {request.url.path} - ERROR - {process_time:.3f}s - {e}")
            raise


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """错误处理中间件：未处理的异常统一返回 500"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            api_logger.error(f"[API] Unexpected error: {e}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal Server Error",
                    "error_code": "INTERNAL_ERROR",
                    "timestamp": time.time(),
                }
            )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """安全头中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        # 添加安全相关的响应头
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


def setup_cors(app):
    """设置CORS"""
    api_config = config_manager.get_api_config()
    cors_origins = api_config.cors_origins

    if "*" in cors_origins:
        api_logger.warning("[CORS] Using wildcard origin is not recommended for production")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials="*" not in cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _request_error_messages(exc: RequestValidationError):
    """将请求格式错误转换为完整的错误描述"""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "is invalid")
        if location:
            label = ".".join(location).replace("_", " ").capitalize()
            message = f"{label} {message[:1].lower()}{message[1:]}"
        messages.append(message)
    return messages


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    api_logger.info(f"[API] Validation failed for {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=422, content={"errors": exc.full_messages})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = _request_error_messages(exc)
    api_logger.info(f"[API] Invalid request for {request.method} {request.url.path}: {messages}")
    return JSONResponse(status_code=422, content={"errors": messages})


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    api_logger.info(f"[API] {exc.message}")
    return JSONResponse(status_code=404, content={"error": "Not found"})


async def budget_error_handler(request: Request, exc: BudgetError) -> JSONResponse:
    api_logger.error(f"[API] {exc}")
    return JSONResponse(status_code=500, content=create_error_response(exc))


def register_exception_handlers(app):
    """注册领域异常到 HTTP 响应的映射"""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(BudgetError, budget_error_handler)


def setup_middleware(app):
    """设置所有中间件"""
    # 设置CORS
    setup_cors(app)

    # 添加中间件（顺序很重要）
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    api_logger.info("[API] Middleware setup completed")
