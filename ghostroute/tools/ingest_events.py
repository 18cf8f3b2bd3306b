"""
事务性导入事件 JSON 文件

用法:
    python -m ghostroute.tools.ingest_events --file data/chapter1.json --chapter 1 --replace

退出码: 0 成功, 1 用法错误, 2 数据库未启用, 3 导入失败（已回滚）
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from loguru import logger

from ghostroute.config import settings
from ghostroute.db.base import Database
from ghostroute.errors import GhostRouteError, ValidationError
from ghostroute.logger_config import tool_logger
from ghostroute.services import IngestService

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_DB_DISABLED = 2
EXIT_FAILED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest an events JSON file in one transaction")
    parser.add_argument("--file", required=True, help="path to a JSON array of events")
    parser.add_argument("--chapter", type=int, default=None, help="target chapter (default partition when omitted)")
    parser.add_argument("--replace", action="store_true", help="delete the chapter's events first")
    return parser


@tool_logger("ingest_events")
async def run(path: str, chapter: Optional[int], replace: bool, db: Optional[Database] = None) -> int:
    try:
        with open(path, "r", encoding="utf-8") as f:
            batch = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ Cannot load {path}: {e}")
        return EXIT_USAGE

    owns_db = db is None
    if owns_db:
        if not settings.DATABASE_ENABLED:
            logger.error("❌ Database is disabled (database.enabled=false)")
            return EXIT_DB_DISABLED
        db = Database.from_settings(settings)

    try:
        await db.open()
        await db.ensure_schema()
        outcome = await IngestService(db).ingest(batch, chapter=chapter, replace=replace)
    except ValidationError as e:
        for violation in e.violations:
            logger.error(f"❌ {violation.kind}: {violation.message}")
        return EXIT_FAILED
    except GhostRouteError as e:
        logger.error(f"❌ Ingest failed, rolled back: {e}")
        return EXIT_FAILED
    finally:
        if owns_db:
            await db.close()

    logger.success(
        f"✅ Inserted {outcome.inserted} event(s) into chapter {chapter} "
        f"(deleted {outcome.deleted})"
    )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse 默认以 2 退出，这里统一为用法错误
        return EXIT_USAGE if e.code else EXIT_OK
    return asyncio.run(run(args.file, args.chapter, args.replace))


if __name__ == "__main__":
    sys.exit(main())
