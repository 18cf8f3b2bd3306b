"""
API v1 路由汇总
"""

from fastapi import APIRouter

from .system import router as system_router
from .events import router as events_router
from .audio import router as audio_router
from .ai import router as ai_router
from .redactions import router as redactions_router

# 创建 v1 API 路由
api_router = APIRouter()

# 注册子路由
api_router.include_router(system_router, tags=["System"])
api_router.include_router(events_router, prefix="/events", tags=["Events"])
api_router.include_router(audio_router, tags=["Audio"])
api_router.include_router(ai_router, tags=["AI"])
api_router.include_router(redactions_router, prefix="/redactions", tags=["Redactions"])
