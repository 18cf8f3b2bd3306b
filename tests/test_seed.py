"""
首次启动数据填充测试
"""

from ghostroute.config.seed import SEED_EVENTS
from ghostroute.db.dao import EventDAO
from ghostroute.services import SeedService


async def test_populates_empty_store_once(db):
    outcome = await SeedService(db).populate()

    assert outcome.inserted == len(SEED_EVENTS) == 24
    assert outcome.orders == list(range(1, 25))
    assert await SeedService(db).populate() is None

    async with db.session() as session:
        events = await EventDAO.list_ordered(session)
    assert len(events) == 24
    assert events[0].actor == "KNOX"
    assert events[1].misc_data["domain"] == "INFRA"


async def test_skips_when_rows_exist(db):
    await SeedService(db, events=[SEED_EVENTS[0]]).populate()

    assert await SeedService(db).populate() is None
    async with db.session() as session:
        assert await EventDAO.count(session) == 1
