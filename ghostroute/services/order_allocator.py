"""
event_order 分配器
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ghostroute.db.dao import EventDAO


class OrderAllocator:
    """
    为追加到分区末尾的一批事件分配顺序

    base = max(分区当前最大值, floor)，第 i 条（从 1 开始）得到 base + i。
    只在同一分区没有并发写入时保证无冲突，调用方需在分区锁 / 事务内调用。
    """

    async def allocate(
        self,
        session: AsyncSession,
        chapter: Optional[int],
        count: int,
        floor: int = 0
    ) -> List[int]:
        """
        Args:
            session: 当前事务会话
            chapter: 目标分区
            count: 需要的数量
            floor: 下限（批次内已有的手写顺序最大值），分配值都大于它

        Returns:
            严格递增的 event_order 列表
        """
        if count <= 0:
            return []
        base = max(await EventDAO.next_order_seed(session, chapter), floor)
        return [base + i for i in range(1, count + 1)]
