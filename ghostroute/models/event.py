"""
事件相关数据模型
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class EventRecord(BaseModel):
    """事件响应"""
    id: int = Field(..., description="自增ID")
    chapter: Optional[int] = Field(None, description="所属章节")
    event_order: int = Field(..., description="分区内播放顺序")
    delay: int = Field(..., description="播放节奏提示（毫秒）")
    action: str = Field(..., description="事件类型")
    actor: Optional[str] = Field(None, description="发起者")
    static_text: Optional[str] = Field(None, description="固定文本")
    voice: Optional[str] = Field(None, description="语音音色")
    api_prompt: Optional[str] = Field(None, description="文本生成提示词")
    is_generated: bool = Field(False, description="是否为AI生成")
    generated_content: Optional[str] = Field(None, description="缓存的AI输出")
    misc_data: Optional[Dict[str, Any]] = Field(None, description="附加数据")

    class Config:
        from_attributes = True


class EventAppendRequest(BaseModel):
    """运行时追加事件请求（自动分配顺序，不替换）"""
    events: List[Any] = Field(..., description="事件列表，结构由校验器检查")
    chapter: Optional[int] = Field(None, description="目标章节")


class EventIngestRequest(EventAppendRequest):
    """事务性导入请求"""
    replace: bool = Field(False, description="是否先清空该章节")
