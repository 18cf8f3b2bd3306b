"""
事件批次校验器

纯函数式校验，不访问存储；收集全部违规项而不是遇到第一个就停止
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ghostroute.errors import (
    DuplicateOrderError, FieldTypeError, GhostRouteError, MissingFieldError, ValidationError
)

REQUIRED_FIELDS = (
    "event_order", "delay", "action", "actor",
    "static_text", "voice", "api_prompt", "misc_data",
)

# 与表结构中 String(50) 列保持一致
SHORT_TEXT_FIELDS = ("actor", "voice")
MAX_SHORT_TEXT = 50

# Text 列；content 是 static_text 的旧名
LONG_TEXT_FIELDS = ("static_text", "content", "api_prompt", "generated_content")

# INTEGER 列为 32 位有符号整数
MAX_INT = 2 ** 31 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class ValidationReport:
    """校验结果"""
    total: int
    violations: List[GhostRouteError] = field(default_factory=list)
    action_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.violations

    def raise_for_violations(self):
        if self.violations:
            raise ValidationError(self.violations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "total": self.total,
            "violations": [v.to_dict() for v in self.violations],
            "action_counts": self.action_counts,
        }


class EventValidator:
    """事件批次校验器"""

    def validate(self, batch: Any, strict: bool = True) -> ValidationReport:
        """
        校验候选批次

        Args:
            batch: 事件对象列表
            strict: 严格模式（文件导入）要求全部字段键存在且 event_order 不重复；
                宽松模式（运行时追加）只要求 action，顺序由分配器决定

        Returns:
            ValidationReport: 违规项列表与各 action 数量
        """
        if not isinstance(batch, (list, tuple)):
            return ValidationReport(
                total=0,
                violations=[FieldTypeError("<batch>", expected="JSON array of events")],
            )

        violations: List[GhostRouteError] = []
        actions: Counter = Counter()
        seen_orders: Dict[int, int] = {}

        for index, item in enumerate(batch):
            if not isinstance(item, dict):
                violations.append(FieldTypeError("<item>", index, expected="object"))
                continue

            required = REQUIRED_FIELDS if strict else ("action",)
            for name in required:
                if name not in item:
                    violations.append(MissingFieldError(name, index))

            action = item.get("action")
            if "action" in item:
                if isinstance(action, str) and 0 < len(action) <= MAX_SHORT_TEXT:
                    actions[action] += 1
                else:
                    violations.append(FieldTypeError("action", index, expected="non-empty string (<=50 chars)"))

            if strict:
                violations.extend(self._check_order(item, index, seen_orders))

            delay = item.get("delay")
            if delay is not None or (strict and "delay" in item):
                if not _is_int(delay) or not 0 <= delay <= MAX_INT:
                    violations.append(FieldTypeError("delay", index, expected=f"integer in [0, {MAX_INT}]"))

            misc = item.get("misc_data")
            if misc is not None and not isinstance(misc, dict):
                violations.append(FieldTypeError("misc_data", index, expected="object"))

            for name in SHORT_TEXT_FIELDS:
                value = item.get(name)
                if value is not None and (not isinstance(value, str) or len(value) > MAX_SHORT_TEXT):
                    violations.append(FieldTypeError(name, index, expected="string (<=50 chars)"))

            for name in LONG_TEXT_FIELDS:
                value = item.get(name)
                if value is not None and not isinstance(value, str):
                    violations.append(FieldTypeError(name, index, expected="string"))

            generated = item.get("is_generated")
            if generated is not None and not isinstance(generated, bool):
                violations.append(FieldTypeError("is_generated", index, expected="boolean"))

        return ValidationReport(total=len(batch), violations=violations, action_counts=dict(actions))

    @staticmethod
    def _check_order(item: Dict[str, Any], index: int, seen: Dict[int, int]) -> Sequence[GhostRouteError]:
        if "event_order" not in item or item["event_order"] is None:
            # 键存在但为空：导入时由分配器补齐
            return ()
        order = item["event_order"]
        if not _is_int(order) or abs(order) > MAX_INT:
            return (FieldTypeError("event_order", index, expected=f"integer within +/-{MAX_INT}"),)
        if order in seen:
            return (DuplicateOrderError(order, index=index),)
        seen[order] = index
        return ()


def validate_events(batch: Any, strict: bool = True) -> ValidationReport:
    """便捷函数"""
    return EventValidator().validate(batch, strict=strict)
