"""
AI 路由 - PEARL 对话与健康检查
"""

from fastapi import APIRouter, Depends

from ghostroute.api.deps import get_health_service, get_pearl_service
from ghostroute.models import PearlRequest
from ghostroute.services import AIHealthService, PearlService

router = APIRouter()


@router.post("/pearl")
async def pearl(
    data: PearlRequest,
    service: PearlService = Depends(get_pearl_service)
):
    """分析员风格回复，生成失败时返回带 STUB_PEARL 标记的占位"""
    return await service.respond(data.prompt)


@router.get("/ai/health")
async def ai_health(service: AIHealthService = Depends(get_health_service)):
    """文本生成与语音合成的连通性和耗时"""
    return await service.check()
