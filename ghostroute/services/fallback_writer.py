"""
数据库不可用时的回放脚本写入

整批事件渲染为一个 SQL 脚本，顺序在回放时由
INSERT ... SELECT COALESCE(MAX(event_order), 0) + 1 分配，
因此脚本可以在数据库恢复后直接执行。
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import aiofiles
from loguru import logger

from ghostroute.utils.sql_literal import partition_clause, quote_identifier, sql_literal

TABLE = "events"
COLUMNS = (
    "chapter", "event_order", "delay", "action", "actor", "static_text",
    "voice", "api_prompt", "is_generated", "generated_content", "misc_data",
)


def event_values(item: Dict[str, Any], chapter: Optional[int]) -> Dict[str, Any]:
    """把导入条目规整为列值（event_order 除外）"""
    return {
        "chapter": chapter,
        "delay": item.get("delay") or 0,
        "action": item.get("action"),
        "actor": item.get("actor"),
        "static_text": item.get("static_text", item.get("content")),
        "voice": item.get("voice"),
        "api_prompt": item.get("api_prompt"),
        "is_generated": item.get("is_generated") or False,
        "generated_content": item.get("generated_content"),
        "misc_data": item.get("misc_data"),
    }


def render_insert(item: Dict[str, Any], chapter: Optional[int]) -> str:
    """渲染单条回放语句"""
    values = event_values(item, chapter)
    columns = ", ".join(quote_identifier(c) for c in COLUMNS)
    rendered = []
    for column in COLUMNS:
        if column == "event_order":
            rendered.append(f"COALESCE(MAX({quote_identifier('event_order')}), 0) + 1")
        else:
            rendered.append(sql_literal(values[column]))
    return (
        f"INSERT INTO {quote_identifier(TABLE)} ({columns}) "
        f"SELECT {', '.join(rendered)} "
        f"FROM {quote_identifier(TABLE)} WHERE {partition_clause('chapter', chapter)};"
    )


def render_script(batch: Sequence[Dict[str, Any]], chapter: Optional[int]) -> str:
    """渲染完整脚本（单事务）"""
    lines: List[str] = [
        f"-- ghostroute fallback: {len(batch)} event(s), chapter={chapter}, "
        f"generated {datetime.now(timezone.utc).isoformat()}",
        "BEGIN;",
    ]
    lines.extend(render_insert(item, chapter) for item in batch)
    lines.append("COMMIT;")
    return "\n".join(lines) + "\n"


class FallbackWriter:
    """回放脚本写入器"""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    async def write(self, batch: Sequence[Dict[str, Any]], chapter: Optional[int] = None) -> Path:
        """
        写入回放脚本

        Returns:
            Path: 脚本路径
        """
        script = render_script(batch, chapter)
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        suffix = "default" if chapter is None else f"ch{chapter}"
        path = self.directory / f"events_fallback_{stamp}_{suffix}_{uuid.uuid4().hex[:8]}.sql"

        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(script)

        logger.warning(f"📝 Wrote fallback SQL for {len(batch)} event(s) to {path}")
        return path
