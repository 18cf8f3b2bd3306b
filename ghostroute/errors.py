"""
错误类型定义

每种错误都有稳定的 kind 字段，to_dict() 给出机器可读的上下文
（出错的下标、字段或 event_order），API 层直接序列化返回
"""

from typing import Any, Dict, List, Optional


class GhostRouteError(Exception):
    """所有业务错误的基类"""

    kind = "GhostRouteError"
    status_code = 500

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        data = {"kind": self.kind, "message": self.message}
        data.update({k: v for k, v in self.context.items() if v is not None})
        return data


class MissingFieldError(GhostRouteError):
    """批次中某条事件缺少必填字段"""

    kind = "MissingFieldError"
    status_code = 400

    def __init__(self, field: str, index: Optional[int] = None):
        super().__init__(f"Missing key '{field}' at index {index}", field=field, index=index)
        self.field = field
        self.index = index


class FieldTypeError(GhostRouteError):
    """字段类型或取值不合法"""

    kind = "TypeError"
    status_code = 400

    def __init__(self, field: str, index: Optional[int] = None, expected: Optional[str] = None):
        message = f"Field '{field}' at index {index} is invalid"
        if expected:
            message += f": expected {expected}"
        super().__init__(message, field=field, index=index, expected=expected)
        self.field = field
        self.index = index


class DuplicateOrderError(GhostRouteError):
    """event_order 在同一分区内重复"""

    kind = "DuplicateOrderError"
    status_code = 409

    def __init__(self, order: int, chapter: Optional[int] = None, index: Optional[int] = None):
        where = f"chapter {chapter}" if chapter is not None else "default partition"
        super().__init__(
            f"Duplicate event_order {order} in {where}",
            order=order, chapter=chapter, index=index,
        )
        self.order = order
        self.chapter = chapter
        self.index = index


class ValidationError(GhostRouteError):
    """批次校验失败（聚合所有违规项），不会产生任何写入"""

    kind = "ValidationError"
    status_code = 400

    def __init__(self, violations: List[GhostRouteError], message: Optional[str] = None):
        super().__init__(message or f"Batch rejected with {len(violations)} violation(s)")
        self.violations = violations

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["count"] = len(self.violations)
        data["violations"] = [v.to_dict() for v in self.violations]
        return data


class StoreUnavailableError(GhostRouteError):
    """数据库不可达或操作超时"""

    kind = "StoreUnavailableError"
    status_code = 503


class PartialFailureError(GhostRouteError):
    """多条目批处理中部分成功、部分失败"""

    kind = "PartialFailureError"
    status_code = 207

    def __init__(self, results: List[Dict[str, Any]]):
        failed = [r for r in results if not r.get("ok")]
        super().__init__(f"{len(failed)} of {len(results)} item(s) failed")
        self.results = results

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["failed"] = [
            {"index": r.get("index"), "error": r.get("error")}
            for r in self.results if not r.get("ok")
        ]
        return data


class UpstreamError(GhostRouteError):
    """外部 AI 服务（文本生成 / 语音合成）调用失败"""

    kind = "UpstreamError"
    status_code = 502
