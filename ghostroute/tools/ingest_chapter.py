"""
追加一个章节的事件（自动分配顺序）

数据库未启用或不可用时，写出可回放的 SQL 脚本，恢复后执行即可

用法:
    python -m ghostroute.tools.ingest_chapter --file data/chapter2.json --chapter 2

退出码: 0 已写入数据库, 1 失败或仅写出回放脚本
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from loguru import logger

from ghostroute.config import settings
from ghostroute.db.base import Database
from ghostroute.errors import GhostRouteError
from ghostroute.logger_config import tool_logger
from ghostroute.services import FallbackWriter, IngestService

EXIT_OK = 0
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Append a chapter of events with allocated orders")
    parser.add_argument("--file", required=True, help="path to a JSON array of events")
    parser.add_argument("--chapter", type=int, default=None, help="target chapter")
    parser.add_argument("--fallback", default=None, help="directory for fallback SQL (default from config.yaml)")
    return parser


@tool_logger("ingest_chapter")
async def run(
    path: str,
    chapter: Optional[int],
    fallback_dir: str,
    db: Optional[Database] = None
) -> int:
    try:
        with open(path, "r", encoding="utf-8") as f:
            batch = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ Cannot load {path}: {e}")
        return EXIT_FAILED

    owns_db = db is None and settings.DATABASE_ENABLED
    if owns_db:
        db = Database.from_settings(settings)

    service = IngestService(None, fallback_writer=FallbackWriter(fallback_dir))
    try:
        if db is not None:
            try:
                await db.open()
                await db.ensure_schema()
                service.db = db
            except GhostRouteError as e:
                logger.warning(f"⚠️  Database unavailable, using fallback: {e}")
        outcome = await service.append(batch, chapter=chapter)
    except GhostRouteError as e:
        logger.error(f"❌ {e.kind}: {e.message}")
        return EXIT_FAILED
    finally:
        if owns_db:
            await db.close()

    if not outcome.ok:
        logger.warning(f"⚠️  Wrote {outcome.fallback_count} event(s) to {outcome.fallback}")
        print(outcome.fallback)
        return EXIT_FAILED

    logger.success(f"✅ Inserted {outcome.inserted} event(s), orders {outcome.orders}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args.file, args.chapter, args.fallback or settings.FALLBACK_DIR))


if __name__ == "__main__":
    sys.exit(main())
