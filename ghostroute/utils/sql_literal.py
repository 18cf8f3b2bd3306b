"""
SQL 字面量渲染

回放文件是原始文本进入 SQL 命令的唯一位置，所有值都经过这里转义：
字符串中的单引号加倍，dict / list 先序列化为 JSON 再按字符串处理。
渲染结果遵循标准 SQL（PostgreSQL standard_conforming_strings / SQLite），
反斜杠不是转义字符。
"""

import json
from typing import Any, Optional


def quote_identifier(name: str) -> str:
    """渲染标识符（表名 / 列名）"""
    if not name or '\x00' in name:
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return '"' + name.replace('"', '""') + '"'


def sql_literal(value: Any) -> str:
    """
    将 Python 值渲染为 SQL 字面量

    Args:
        value: None / bool / int / float / str / dict / list

    Returns:
        可直接拼入语句的字面量文本

    Raises:
        ValueError: 字符串中含 NUL 字符，或浮点数非有限值
        TypeError: 不支持的类型
    """
    if value is None:
        return "NULL"
    # bool 必须先于 int 判断
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"Non-finite float cannot be rendered: {value}")
        return repr(value)
    if isinstance(value, (dict, list)):
        return sql_literal(json.dumps(value, ensure_ascii=False, separators=(",", ":")))
    if isinstance(value, str):
        if '\x00' in value:
            raise ValueError("NUL character cannot be stored in a SQL text literal")
        return "'" + value.replace("'", "''") + "'"
    raise TypeError(f"Unsupported SQL literal type: {type(value).__name__}")


def partition_clause(column: str, value: Optional[int]) -> str:
    """渲染分区条件，空值使用 IS NULL"""
    if value is None:
        return f"{quote_identifier(column)} IS NULL"
    return f"{quote_identifier(column)} = {sql_literal(int(value))}"
