"""
FastAPI 应用入口
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from endpoints import SpeechSynthesizer, TextGenerator
from ghostroute.api import api_v1_router
from ghostroute.config import settings
from ghostroute.db.base import Database
from ghostroute.errors import GhostRouteError
from ghostroute.models import ErrorResponse
from ghostroute.services import SeedService


async def init_database() -> Optional[Database]:
    """
    连接数据库、建表并在空库时填充初始事件

    失败不会中断启动：此时 db 为 None，追加事件会写入回放脚本
    """
    if not settings.DATABASE_ENABLED:
        logger.info("📦 Database disabled, skipping initialization")
        return None

    db = Database.from_settings(settings)
    try:
        logger.info("🔍 Checking database connection...")
        await db.open()
        await db.ping()
        await db.ensure_schema()
        logger.success("✅ Database connection pool initialized")
    except GhostRouteError as e:
        logger.error(f"❌ Database initialization failed: {e}")
        logger.warning("⚠️  Application will continue without a database (fallback mode)")
        await db.close()
        return None

    if settings.SEED_ON_STARTUP:
        try:
            await SeedService(db).populate()
        except GhostRouteError as e:
            logger.error(f"❌ Initial population failed: {e}")

    return db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 启动时执行
    logger.info(f"🚀 Starting {settings.APP_NAME}...")

    app.state.text_generator = TextGenerator(
        settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.AI_REQUEST_TIMEOUT
    )
    app.state.speech_synthesizer = SpeechSynthesizer(
        settings.GEMINI_API_KEY, settings.TTS_LANGUAGE, settings.AI_REQUEST_TIMEOUT
    )
    if not settings.GEMINI_API_KEY:
        logger.warning("⚠️  GEMINI_API_KEY not set, AI features will return stubs")

    app.state.db = await init_database()

    logger.success("🎉 Application started successfully!")

    yield

    # 关闭时执行
    logger.info("👋 Shutting down...")

    if app.state.db is not None:
        await app.state.db.close()
        logger.info("✅ Database connections closed")

    logger.success("✅ Application shutdown complete")


async def ghostroute_exception_handler(request: Request, exc: GhostRouteError):
    """业务错误：按错误类型映射状态码，返回稳定的 kind"""
    if exc.status_code >= 500:
        logger.error(f"❌ {exc.kind} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"⚠️  {exc.kind} on {request.url.path}: {exc.message}")

    body = ErrorResponse(code=exc.status_code, message=exc.message, error=exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def global_exception_handler(request: Request, exc: Exception):
    """全局异常处理"""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {str(exc)}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": 500,
            "message": "Internal server error",
            "error": {
                "kind": type(exc).__name__,
                "message": str(exc)
            }
        }
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用"""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.db = None

    # CORS 配置
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册 API 路由
    app.include_router(api_v1_router, prefix=settings.API_V1_PREFIX)

    app.add_exception_handler(GhostRouteError, ghostroute_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    @app.get("/")
    async def root():
        """健康检查"""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "ok"
        }

    @app.get("/health")
    async def health_check(request: Request):
        """健康检查（详细）"""
        health_status = {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "services": {}
        }

        db: Optional[Database] = request.app.state.db
        if not settings.DATABASE_ENABLED:
            health_status["services"]["database"] = "disabled"
        elif db is None:
            health_status["services"]["database"] = "not_initialized"
            health_status["status"] = "degraded"
        else:
            try:
                await db.ping()
                health_status["services"]["database"] = "healthy"
            except GhostRouteError:
                health_status["services"]["database"] = "unhealthy"
                health_status["status"] = "degraded"

        return health_status

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "ghostroute.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
