"""
首次启动数据填充
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from ghostroute.config.seed import SEED_EVENTS
from ghostroute.db.base import Database
from ghostroute.db.dao import EventDAO
from ghostroute.models import IngestOutcome
from ghostroute.services.ingest_service import IngestService


class SeedService:
    """事件表为空时写入内置的第一章事件"""

    def __init__(self, db: Database, events: Optional[List[Dict[str, Any]]] = None):
        self.db = db
        self.events = SEED_EVENTS if events is None else events

    async def populate(self) -> Optional[IngestOutcome]:
        """
        幂等填充：建表后若已有数据则跳过

        Returns:
            写入结果；已有数据时返回 None
        """
        await self.db.ensure_schema()

        count = await self.db.run_read(EventDAO.count)
        if count > 0:
            logger.info(f"📦 Events table already populated ({count} rows)")
            return None

        logger.info(f"📦 Populating events table with {len(self.events)} initial events...")
        outcome = await IngestService(self.db).ingest(self.events, chapter=None, replace=False)
        logger.success("✅ Database population complete")
        return outcome
