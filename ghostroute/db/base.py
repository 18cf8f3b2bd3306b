"""
数据库基础配置

包含 Base 类、数据库连接句柄（Database）、分区锁等
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Hashable, List, Optional, TypeVar

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from ghostroute.errors import StoreUnavailableError

# 声明式基类
Base = declarative_base()

T = TypeVar("T")

# 连接失败 / 超时类异常，统一转换为 StoreUnavailableError
UNAVAILABLE_ERRORS = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
)

# pg_advisory_xact_lock 的命名空间（两参数形式的第一个参数）
ADVISORY_LOCK_NAMESPACE = 7301


def get_database_url(url: str, async_mode: bool = True) -> str:
    """
    获取数据库连接 URL

    Args:
        url: 原始连接串
        async_mode: 是否使用异步驱动

    Returns:
        数据库连接 URL
    """
    if not url:
        raise RuntimeError("DATABASE_URL is not set")

    # 异步模式：postgresql:// -> postgresql+asyncpg://, sqlite:// -> sqlite+aiosqlite://
    if async_mode and url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif async_mode and url.startswith("sqlite://"):
        url = url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    return url


class PartitionLocks:
    """
    进程内按分区（chapter）划分的写锁，同一分区的写入串行，不同分区并行

    没有持有者和等待者的锁会被移除，字典大小只取决于当前活跃的分区数
    """

    def __init__(self):
        # key -> [锁, 持有或等待的协程数]
        self._locks: Dict[Hashable, List[Any]] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]


class Database:
    """
    进程级数据库句柄

    启动时创建一次（open），关闭时释放（close），通过依赖注入传给各组件，
    不作为模块级全局变量引用。所有存储操作都有连接/执行超时，
    超时或连接失败统一抛出 StoreUnavailableError。
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 5,
        pool_timeout: float = 10.0,
        connect_timeout: float = 10.0,
        operation_timeout: float = 30.0,
    ):
        self.url = get_database_url(url, async_mode=True)
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self.partition_locks = PartitionLocks()

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """根据全局配置创建句柄（尚未连接）"""
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            connect_timeout=settings.DATABASE_CONNECT_TIMEOUT,
            operation_timeout=settings.DATABASE_OPERATION_TIMEOUT,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def dialect_name(self) -> str:
        if self.engine is not None:
            return self.engine.dialect.name
        return "sqlite" if self.is_sqlite else "postgresql"

    def _engine_options(self) -> Dict[str, Any]:
        if self.is_sqlite:
            options: Dict[str, Any] = {"connect_args": {"timeout": self.connect_timeout}}
            # 内存库只能共享同一个连接
            if ":memory:" in self.url or self.url.rstrip("/").endswith("aiosqlite:"):
                options["poolclass"] = StaticPool
            return options

        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
            "pool_pre_ping": True,
            "connect_args": {
                "timeout": self.connect_timeout,
                "command_timeout": self.operation_timeout,
            },
        }

    async def open(self) -> "Database":
        """创建异步引擎和会话工厂"""
        if self.engine is not None:
            return self

        self.engine = create_async_engine(self.url, echo=self.echo, **self._engine_options())

        if self.is_sqlite:
            # pysqlite 默认的事务处理会吞掉 SAVEPOINT，改为手动 BEGIN
            @event.listens_for(self.engine.sync_engine, "connect")
            def _disable_pysqlite_begin(dbapi_connection, connection_record):
                dbapi_connection.isolation_level = None

            @event.listens_for(self.engine.sync_engine, "begin")
            def _emit_begin(conn):
                conn.exec_driver_sql("BEGIN")

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    async def close(self):
        """关闭数据库连接"""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

    def _require_open(self):
        if self.session_factory is None:
            raise StoreUnavailableError("Database not initialized. Call open() first.")

    async def ensure_schema(self):
        """幂等建表，每次启动都可以安全调用"""
        self._require_open()
        # 导入所有模型以确保 Base 知道它们
        from ghostroute.db import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await asyncio.wait_for(
                    conn.run_sync(Base.metadata.create_all),
                    timeout=self.operation_timeout,
                )
        except UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Schema setup failed: {e}") from e

    async def ping(self) -> bool:
        self._require_open()
        try:
            async with self.engine.connect() as conn:
                await asyncio.wait_for(conn.execute(text("SELECT 1")), timeout=self.connect_timeout)
        except UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Database unreachable: {e}") from e
        return True

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        获取只读会话

        使用示例：
        ```python
        async with db.session() as session:
            events = await EventDAO.list_ordered(session)
        ```
        """
        self._require_open()
        try:
            async with self.session_factory() as session:
                yield session
        except UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Database unreachable: {e}") from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        获取事务会话：正常退出时提交，任何异常都完整回滚

        Yields:
            AsyncSession: 数据库会话
        """
        self._require_open()
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    yield session
        except UNAVAILABLE_ERRORS as e:
            raise StoreUnavailableError(f"Database unreachable: {e}") from e
        except DBAPIError as e:
            if e.connection_invalidated:
                raise StoreUnavailableError(f"Database connection lost: {e}") from e
            raise

    async def _lock_partition(self, session: AsyncSession, chapter: Optional[int]):
        """PostgreSQL 上对分区加事务级 advisory 锁，跨进程串行同一分区的写入"""
        if self.dialect_name != "postgresql":
            return
        key = -1 if chapter is None else int(chapter)
        await session.execute(
            text("SELECT pg_advisory_xact_lock(:ns, :key)"),
            {"ns": ADVISORY_LOCK_NAMESPACE, "key": key},
        )

    async def _bounded(self, unit: Awaitable[T]) -> T:
        """operation_timeout 约束下执行，超时抛出 StoreUnavailableError"""
        try:
            return await asyncio.wait_for(unit, timeout=self.operation_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"❌ Store operation timed out after {self.operation_timeout}s")
            raise StoreUnavailableError(
                f"Store operation timed out after {self.operation_timeout}s"
            ) from e

    async def run_in_transaction(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        chapter: Optional[int] = None,
        lock_partition: bool = True,
    ) -> T:
        """
        在单个事务内执行一组写操作

        同一分区的写入通过进程内锁 + 数据库锁串行化；整个工作单元受
        operation_timeout 约束，超时抛出 StoreUnavailableError 并回滚。

        Args:
            work: 接收会话的协程函数
            chapter: 写入涉及的分区
            lock_partition: 是否串行化该分区（不涉及事件表的写入传 False）

        Returns:
            work 的返回值
        """
        self._require_open()

        async def _unit() -> T:
            async with self.transaction() as session:
                if lock_partition:
                    await self._lock_partition(session, chapter)
                return await work(session)

        if not lock_partition:
            return await self._bounded(_unit())

        async with self.partition_locks.hold(chapter):
            return await self._bounded(_unit())

    async def run_read(self, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """
        只读工作单元，与写入一样受 operation_timeout 约束

        使用示例：
        ```python
        events = await db.run_read(lambda session: EventDAO.list_ordered(session, 1))
        ```
        """
        self._require_open()

        async def _unit() -> T:
            async with self.session() as session:
                return await work(session)

        return await self._bounded(_unit())
