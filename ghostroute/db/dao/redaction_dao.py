"""
涂黑文档数据访问对象
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ghostroute.db.models.redaction import Redaction


class RedactionDAO:
    """涂黑文档 DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        doc_text: str,
        user: str = "anonymous",
        redacted_terms: Optional[List[str]] = None,
        source_event: Optional[int] = None,
        notes: Optional[str] = None
    ) -> Redaction:
        """创建涂黑文档记录"""
        redaction = Redaction(
            user=user,
            doc_text=doc_text,
            redacted_terms=redacted_terms or [],
            source_event=source_event,
            notes=notes,
        )

        session.add(redaction)
        await session.flush()

        return redaction

    @staticmethod
    async def list_recent(session: AsyncSession, limit: int = 50) -> List[Redaction]:
        """获取最近的涂黑文档（不含原文）"""
        result = await session.execute(
            select(Redaction)
            .order_by(Redaction.created_at.desc(), Redaction.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
