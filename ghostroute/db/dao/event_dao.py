"""
事件数据访问对象
"""

from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ghostroute.db.models.event import Event
from ghostroute.errors import DuplicateOrderError, MissingFieldError, ValidationError

REQUIRED_COLUMNS = ("event_order", "delay", "action")


def _partition(chapter: Optional[int]):
    """分区条件：chapter 为空即默认分区"""
    if chapter is None:
        return Event.chapter.is_(None)
    return Event.chapter == chapter


class EventDAO:
    """事件 DAO"""

    @staticmethod
    async def next_order_seed(session: AsyncSession, chapter: Optional[int] = None) -> int:
        """返回分区内当前最大的 event_order，空分区返回 0"""
        result = await session.execute(
            select(func.coalesce(func.max(Event.event_order), 0)).where(_partition(chapter))
        )
        return int(result.scalar() or 0)

    @staticmethod
    async def order_exists(session: AsyncSession, chapter: Optional[int], event_order: int) -> bool:
        result = await session.execute(
            select(Event.id).where(_partition(chapter), Event.event_order == event_order).limit(1)
        )
        return result.first() is not None

    @staticmethod
    async def insert(session: AsyncSession, event: Event) -> int:
        """
        插入一条事件

        Args:
            session: 数据库会话（由调用方管理事务）
            event: 待插入事件

        Returns:
            int: 新事件的自增ID

        Raises:
            ValidationError: 缺少 event_order / delay / action
            DuplicateOrderError: 分区内 event_order 已存在，存储保持不变
        """
        missing = [MissingFieldError(name) for name in REQUIRED_COLUMNS if getattr(event, name) is None]
        if missing:
            raise ValidationError(missing)

        if await EventDAO.order_exists(session, event.chapter, event.event_order):
            raise DuplicateOrderError(event.event_order, chapter=event.chapter)

        # 并发写入时以唯一约束兜底，SAVEPOINT 保证失败后会话仍可用
        try:
            async with session.begin_nested():
                session.add(event)
                await session.flush()
        except IntegrityError as e:
            raise DuplicateOrderError(event.event_order, chapter=event.chapter) from e

        return event.id

    @staticmethod
    async def delete_chapter(session: AsyncSession, chapter: Optional[int]) -> int:
        """删除整个分区，分区不存在时返回 0"""
        result = await session.execute(
            delete(Event).where(_partition(chapter)).execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    @staticmethod
    async def list_ordered(
        session: AsyncSession,
        chapter: Optional[int] = None,
        whole_store: bool = False
    ) -> List[Event]:
        """
        按 event_order 升序获取事件

        Args:
            session: 数据库会话
            chapter: 分区（whole_store 为 False 时生效）
            whole_store: 是否返回全部分区

        Returns:
            事件列表；chapter / id 作为次序键保证排序稳定
        """
        query = select(Event)
        if not whole_store:
            query = query.where(_partition(chapter))
        query = query.order_by(Event.event_order.asc(), Event.chapter.asc(), Event.id.asc())

        result = await session.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(session: AsyncSession) -> int:
        result = await session.execute(select(func.count()).select_from(Event))
        return int(result.scalar() or 0)
