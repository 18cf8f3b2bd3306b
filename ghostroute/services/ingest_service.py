"""
事件导入服务

外部事件批次进入存储的唯一入口：
- ingest: 校验 → (可选)删除章节 → 保留手写顺序或分配顺序 → 写入，单事务
- append: 运行时追加，宽松校验、总是自动分配，数据库不可用时写回放脚本
"""

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from ghostroute.db.base import Database
from ghostroute.db.dao import EventDAO
from ghostroute.db.models.event import Event
from ghostroute.errors import StoreUnavailableError
from ghostroute.models import AppendOutcome, IngestOutcome
from ghostroute.services.fallback_writer import FallbackWriter, event_values
from ghostroute.services.order_allocator import OrderAllocator
from ghostroute.services.validator import EventValidator


def build_event(item: Dict[str, Any], chapter: Optional[int], event_order: int) -> Event:
    """由导入条目构造 ORM 对象"""
    return Event(event_order=event_order, **event_values(item, chapter))


class IngestService:
    """事件导入服务"""

    def __init__(
        self,
        db: Optional[Database],
        fallback_writer: Optional[FallbackWriter] = None,
        validator: Optional[EventValidator] = None,
        allocator: Optional[OrderAllocator] = None,
    ):
        self.db = db
        self.fallback_writer = fallback_writer
        self.validator = validator or EventValidator()
        self.allocator = allocator or OrderAllocator()

    async def ingest(
        self,
        batch: Sequence[Dict[str, Any]],
        chapter: Optional[int] = None,
        replace: bool = False
    ) -> IngestOutcome:
        """
        事务性导入

        Args:
            batch: 事件列表（严格校验）
            chapter: 目标章节，为空即默认分区
            replace: 是否在同一事务内先清空该章节

        Returns:
            IngestOutcome

        Raises:
            ValidationError: 批次不合法，存储未被修改
            DuplicateOrderError: 与已有数据冲突，事务已回滚
            StoreUnavailableError: 数据库不可用
        """
        report = self.validator.validate(batch, strict=True)
        report.raise_for_violations()

        if self.db is None:
            raise StoreUnavailableError("Database is not configured")

        async def work(session: AsyncSession):
            deleted = 0
            if replace:
                deleted = await EventDAO.delete_chapter(session, chapter)
                logger.info(f"🗑️  Deleted {deleted} existing event(s) for chapter {chapter}")
            orders = await self._insert_batch(session, batch, chapter, keep_authored=True)
            return deleted, orders

        deleted, orders = await self.db.run_in_transaction(work, chapter=chapter)
        logger.success(f"✅ Ingested {len(orders)} event(s) for chapter {chapter}")

        return IngestOutcome(
            ok=True,
            chapter=chapter,
            inserted=len(orders),
            deleted=deleted,
            orders=orders,
            action_counts=report.action_counts,
        )

    async def append(
        self,
        batch: Sequence[Dict[str, Any]],
        chapter: Optional[int] = None
    ) -> AppendOutcome:
        """
        运行时追加（不替换、总是自动分配顺序）

        数据库未配置或不可用时整批写入回放脚本，返回 ok=False；
        其余错误（校验失败、顺序冲突）照常抛出。
        """
        report = self.validator.validate(batch, strict=False)
        report.raise_for_violations()

        if self.db is None:
            return await self._fallback(batch, chapter, StoreUnavailableError("Database is not configured"))

        async def work(session: AsyncSession):
            return await self._insert_batch(session, batch, chapter, keep_authored=False)

        try:
            orders = await self.db.run_in_transaction(work, chapter=chapter)
        except StoreUnavailableError as e:
            logger.error(f"❌ Append failed, store unavailable: {e}")
            return await self._fallback(batch, chapter, e)

        logger.info(f"✅ Appended {len(orders)} event(s) to chapter {chapter}: {orders}")
        return AppendOutcome(ok=True, chapter=chapter, inserted=len(orders), orders=orders)

    async def list_events(self, chapter: Optional[int] = None) -> List[Event]:
        """按顺序列出事件；chapter 为空时返回整个存储，未配置数据库时返回空列表"""
        if self.db is None:
            return []
        return await self.db.run_read(
            lambda session: EventDAO.list_ordered(session, chapter, whole_store=chapter is None)
        )

    async def _insert_batch(
        self,
        session: AsyncSession,
        batch: Sequence[Dict[str, Any]],
        chapter: Optional[int],
        keep_authored: bool
    ) -> List[int]:
        """按输入顺序写入，返回每条的 event_order"""
        def authored(item):
            return item.get("event_order") if keep_authored else None

        authored_orders = [authored(item) for item in batch if authored(item) is not None]
        pending = len(batch) - len(authored_orders)

        # 批次全部带手写顺序时不经过分配器
        allocated = iter(
            await self.allocator.allocate(session, chapter, pending, floor=max(authored_orders, default=0))
            if pending else ()
        )

        orders = []
        for item in batch:
            order = authored(item)
            if order is None:
                order = next(allocated)
            await EventDAO.insert(session, build_event(item, chapter, order))
            orders.append(order)
        return orders

    async def _fallback(
        self,
        batch: Sequence[Dict[str, Any]],
        chapter: Optional[int],
        error: StoreUnavailableError
    ) -> AppendOutcome:
        if self.fallback_writer is None:
            raise error
        path = await self.fallback_writer.write(batch, chapter)
        return AppendOutcome(
            ok=False,
            chapter=chapter,
            fallback=str(path),
            fallback_count=len(batch),
            error=error.to_dict(),
        )
