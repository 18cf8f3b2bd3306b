"""
涂黑文档路由
"""

from fastapi import APIRouter, Depends, Query

from ghostroute.api.deps import get_redaction_service
from ghostroute.models import RedactionCreate
from ghostroute.services import RedactionService

router = APIRouter()


@router.post("")
async def create_redaction(
    data: RedactionCreate,
    service: RedactionService = Depends(get_redaction_service)
):
    """保存涂黑文档"""
    return await service.create(data)


@router.get("")
async def list_redactions(
    limit: int = Query(50, ge=1, le=200),
    service: RedactionService = Depends(get_redaction_service)
):
    """最近的涂黑文档（不含原文）"""
    return await service.list_recent(limit)
