"""
数据库句柄测试：操作超时、分区锁
"""

import asyncio

import pytest

from ghostroute.db.base import Database, PartitionLocks
from ghostroute.db.dao import EventDAO
from ghostroute.errors import StoreUnavailableError


@pytest.fixture
async def slow_db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'slow.db'}", operation_timeout=0.2)
    await database.open()
    await database.ensure_schema()
    yield database
    await database.close()


class TestOperationTimeout:

    async def test_write_unit_times_out(self, slow_db):
        async def stuck(session):
            await EventDAO.count(session)
            await asyncio.sleep(5)

        with pytest.raises(StoreUnavailableError) as exc_info:
            await slow_db.run_in_transaction(stuck, chapter=1)

        assert exc_info.value.to_dict() == {
            "kind": "StoreUnavailableError",
            "message": "Store operation timed out after 0.2s",
        }
        # 超时后分区锁已释放，后续写入正常
        assert await slow_db.run_in_transaction(EventDAO.count, chapter=1) == 0
        assert len(slow_db.partition_locks) == 0

    async def test_read_unit_times_out(self, slow_db):
        async def stuck(session):
            await asyncio.sleep(5)

        with pytest.raises(StoreUnavailableError):
            await slow_db.run_read(stuck)

        assert await slow_db.run_read(EventDAO.count) == 0

    async def test_unopened_handle(self, tmp_path):
        with pytest.raises(StoreUnavailableError):
            await Database(f"sqlite:///{tmp_path / 'x.db'}").run_read(EventDAO.count)


class TestPartitionLocks:

    async def test_idle_locks_are_evicted(self):
        locks = PartitionLocks()
        for chapter in range(100):
            async with locks.hold(chapter):
                assert len(locks) == 1
        assert len(locks) == 0

    async def test_same_partition_is_serialized(self):
        locks = PartitionLocks()
        active = []
        overlap = []

        async def writer(name):
            async with locks.hold(1):
                active.append(name)
                overlap.append(len(active))
                await asyncio.sleep(0.01)
                active.remove(name)

        await asyncio.gather(*[writer(n) for n in range(5)])

        assert overlap == [1] * 5
        assert len(locks) == 0

    async def test_other_partitions_run_in_parallel(self):
        locks = PartitionLocks()
        entered = asyncio.Event()

        async def holder():
            async with locks.hold(1):
                await entered.wait()

        task = asyncio.create_task(holder())
        await asyncio.sleep(0)
        async with locks.hold(2):
            assert len(locks) == 2
            entered.set()
        await task
        assert len(locks) == 0
