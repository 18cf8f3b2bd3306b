"""
工具函数
"""

from .audio import silent_wav, safe_file_name
from .retry import async_retry
from .sql_literal import sql_literal, quote_identifier, partition_clause

__all__ = [
    "silent_wav",
    "safe_file_name",
    "async_retry",
    "sql_literal",
    "quote_identifier",
    "partition_clause",
]
