"""
导入流程结果模型
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class IngestOutcome(BaseModel):
    """事务性导入结果"""
    ok: bool = Field(True, description="是否成功")
    chapter: Optional[int] = Field(None, description="目标章节")
    inserted: int = Field(0, description="写入条数")
    deleted: int = Field(0, description="替换模式下删除的条数")
    orders: List[int] = Field(default_factory=list, description="按输入顺序写入的 event_order")
    action_counts: Dict[str, int] = Field(default_factory=dict, description="各 action 数量")


class AppendOutcome(BaseModel):
    """运行时追加结果；数据库不可用时 ok 为 False 并给出回放文件"""
    ok: bool = Field(True, description="是否写入数据库")
    chapter: Optional[int] = Field(None, description="目标章节")
    inserted: int = Field(0, description="写入条数")
    orders: List[int] = Field(default_factory=list, description="分配的 event_order")
    fallback: Optional[str] = Field(None, description="回放 SQL 文件路径")
    fallback_count: int = Field(0, description="回放文件中的语句条数")
    error: Optional[Dict[str, Any]] = Field(None, description="失败原因")


class MigrationResult(BaseModel):
    """单个迁移脚本的执行结果"""
    name: str = Field(..., description="脚本文件名")
    ok: bool = Field(..., description="是否成功")
    statements: int = Field(0, description="执行的语句数")
    error: Optional[str] = Field(None, description="错误信息")
