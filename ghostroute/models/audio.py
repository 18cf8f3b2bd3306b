"""
音频与AI接口数据模型
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AudioUpload(BaseModel):
    """上传 base64 音频"""
    file_name: str = Field(..., alias="fileName", description="文件名")
    base64: str = Field(..., description="base64 编码的音频内容")

    class Config:
        populate_by_name = True


class TtsRequest(BaseModel):
    """文本转语音请求"""
    text: str = Field("", description="待合成文本")
    voice: str = Field("Charon", description="音色")
    file_name: Optional[str] = Field(None, alias="fileName", description="输出文件名")

    class Config:
        populate_by_name = True


class AudioLogBatchRequest(BaseModel):
    """批量音频日志请求"""
    logs: List[Dict[str, Any]] = Field(default_factory=list, description="日志列表 {text, voice?, fileName?, actor?}")
    include_events: bool = Field(False, alias="includeEvents", description="是否同时写入 audioLog 事件")
    chapter: Optional[int] = Field(None, description="写入事件的章节")

    class Config:
        populate_by_name = True


class AudioLogResult(BaseModel):
    """单条音频日志的处理结果"""
    index: int = Field(..., description="输入下标")
    ok: bool = Field(..., description="是否成功")
    text_preview: Optional[str] = Field(None, alias="textPreview", description="文本预览")
    url: Optional[str] = Field(None, description="音频地址")
    voice: Optional[str] = Field(None, description="音色")
    stub: bool = Field(False, description="是否为静音占位")
    event_order: Optional[int] = Field(None, alias="insertedEventOrder", description="写入事件的顺序")
    error: Optional[Dict[str, Any]] = Field(None, description="失败原因")

    class Config:
        populate_by_name = True


class PearlRequest(BaseModel):
    """PEARL 对话请求"""
    prompt: str = Field("", description="用户问题")


class RedactionCreate(BaseModel):
    """提交涂黑文档"""
    user: str = Field("anonymous", description="提交用户")
    doc_text: Optional[str] = Field(None, description="文档原文")
    redacted_terms: List[str] = Field(default_factory=list, description="被涂黑的词")
    source_event: Optional[int] = Field(None, description="来源事件")
    notes: Optional[str] = Field(None, description="备注")
