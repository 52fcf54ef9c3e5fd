"""
FastAPI application for the budget system.
Main application entry point for the API server.
"""

import uvicorn
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI

from utils import api_logger, config_manager

from .routes import router
from .middleware import setup_middleware

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    api_logger.info("[API] Starting Budget API...")

    # 启动时初始化
    try:
        from budget_manager import budget_manager
        budget_manager.initialize()
        api_logger.info("[API] BudgetManager initialized successfully")
    except Exception as e:
        api_logger.error(f"[API] Failed to initialize BudgetManager: {e}")
        # 不阻止应用启动，但记录错误

    yield

    api_logger.info("[API] Shutting down Budget API...")


# 创建FastAPI应用
app = FastAPI(
    title="Budget API",
    description="Quotes, line items and payments for an eyewear shop",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# 设置中间件
setup_middleware(app)

# 添加路由
app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """根路径"""
    return {
        "message": "Budget API",
        "version": API_VERSION,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": API_VERSION
    }


def run_server(host: str = None, port: int = None, reload: bool = None):
    """启动API服务"""
    api_config = config_manager.get_api_config()
    host = host or api_config.host
    port = port or api_config.port
    reload = api_config.reload if reload is None else reload

    api_logger.info(f"[API] Starting server on {host}:{port}")

    # 开发模式
    if reload:
        uvicorn.run(
            "api.app:app",
            host=host,
            port=port,
            reload=True,
            log_level="info"
        )
    # 生产模式
    else:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level="info"
        )


if __name__ == "__main__":
    from utils import initialize_logging
    initialize_logging()
    run_server()
