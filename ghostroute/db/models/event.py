"""
事件表 ORM 模型
"""

from sqlalchemy import Boolean, Column, Index, Integer, String, Text, UniqueConstraint, false, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from ghostroute.db.base import Base

# None 写入为 SQL NULL，而不是 JSON 'null'
MiscData = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class Event(Base):
    """叙事事件表"""
    __tablename__ = "events"

    # 主键
    id = Column(Integer, primary_key=True, autoincrement=True, comment="自增ID")

    # 分区与排序
    chapter = Column(Integer, nullable=True, comment="所属章节（为空即默认分区）")
    event_order = Column(Integer, nullable=False, comment="分区内唯一的播放顺序")
    delay = Column(Integer, nullable=False, default=0, comment="播放节奏提示（毫秒）")

    # 事件内容
    action = Column(String(50), nullable=False, comment="事件类型")
    actor = Column(String(50), nullable=True, comment="发起者")
    static_text = Column(Text, nullable=True, comment="固定文本")
    voice = Column(String(50), nullable=True, comment="语音音色")
    api_prompt = Column(Text, nullable=True, comment="播放时转发给文本生成服务的提示词")

    # AI 生成内容
    is_generated = Column(Boolean, nullable=False, default=False, server_default=false(), comment="是否为AI生成")
    generated_content = Column(Text, nullable=True, comment="缓存的AI输出")

    # 各类型事件的附加数据
    misc_data = Column(MiscData, nullable=True, comment="附加数据（JSON对象）")

    # 约束与索引
    __table_args__ = (
        UniqueConstraint("chapter", "event_order", name="uq_events_chapter_order"),
        # chapter 为空时唯一约束不生效，默认分区单独用部分索引保证唯一
        Index(
            "uq_events_default_order", "event_order",
            unique=True,
            postgresql_where=text("chapter IS NULL"),
            sqlite_where=text("chapter IS NULL"),
        ),
        # 自增ID不复用
        {"sqlite_autoincrement": True},
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "chapter": self.chapter,
            "event_order": self.event_order,
            "delay": self.delay,
            "action": self.action,
            "actor": self.actor,
            "static_text": self.static_text,
            "voice": self.voice,
            "api_prompt": self.api_prompt,
            "is_generated": bool(self.is_generated),
            "generated_content": self.generated_content,
            "misc_data": self.misc_data,
        }
