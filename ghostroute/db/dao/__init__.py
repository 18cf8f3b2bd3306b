"""
数据访问对象（DAO）层

封装数据库操作，提供给服务层使用
"""

from .event_dao import EventDAO
from .redaction_dao import RedactionDAO

__all__ = [
    "EventDAO",
    "RedactionDAO",
]
