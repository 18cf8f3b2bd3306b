"""
数据库模块

包含 SQLAlchemy ORM 模型、数据库连接句柄等
"""

from .base import Base, Database, PartitionLocks, get_database_url

__all__ = [
    "Base",
    "Database",
    "PartitionLocks",
    "get_database_url",
]
