"""
涂黑文档表 ORM 模型
"""

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.types import JSON
from datetime import datetime

from ghostroute.db.base import Base


class Redaction(Base):
    """玩家提交的涂黑文档"""
    __tablename__ = "redactions"

    # 主键
    id = Column(Integer, primary_key=True, autoincrement=True, comment="自增ID")

    # 内容
    user = Column(String(64), nullable=False, default="anonymous", comment="提交用户")
    doc_text = Column(Text, nullable=False, comment="文档原文")
    redacted_terms = Column(JSON, nullable=True, comment="被涂黑的词列表")
    source_event = Column(Integer, nullable=True, comment="来源事件 event_order")
    notes = Column(Text, nullable=True, comment="备注")

    # 时间戳
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, comment="创建时间")
