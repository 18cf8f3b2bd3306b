"""
事件路由 - 列表、运行时追加、事务性导入
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ghostroute.api.deps import get_ingest_service
from ghostroute.models import (
    AppendOutcome, EventAppendRequest, EventIngestRequest, EventRecord, IngestOutcome
)
from ghostroute.services import IngestService

router = APIRouter()


@router.get("", response_model=List[EventRecord])
async def list_events(
    chapter: Optional[int] = Query(None, description="章节，为空时返回全部事件"),
    service: IngestService = Depends(get_ingest_service)
):
    """
    按 event_order 升序返回事件

    - 空库返回空列表
    - 数据库未配置时返回空列表
    """
    events = await service.list_events(chapter)
    return [EventRecord.model_validate(event) for event in events]


@router.post("", response_model=AppendOutcome)
async def append_events(
    data: EventAppendRequest,
    service: IngestService = Depends(get_ingest_service)
):
    """
    运行时追加事件

    - 宽松校验，顺序总是自动分配，不替换已有数据
    - 数据库不可用时写入回放脚本并返回 ok=false
    """
    return await service.append(data.events, chapter=data.chapter)


@router.post("/ingest", response_model=IngestOutcome)
async def ingest_events(
    data: EventIngestRequest,
    service: IngestService = Depends(get_ingest_service)
):
    """
    事务性导入

    - 严格校验，失败时不做任何写入
    - replace=true 时在同一事务内先清空该章节
    """
    return await service.ingest(data.events, chapter=data.chapter, replace=data.replace)
