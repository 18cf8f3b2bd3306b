"""
执行 migrations/ 下的 SQL 迁移脚本

用法:
    python -m ghostroute.tools.run_migrations --dir migrations

单个脚本失败只记录日志；除数据库未启用外总是以 0 退出
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from ghostroute.config import settings
from ghostroute.db.base import Database
from ghostroute.logger_config import tool_logger
from ghostroute.services import MigrationRunner

EXIT_OK = 0
EXIT_DB_DISABLED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply idempotent SQL migrations in filename order")
    parser.add_argument("--dir", default=None, help="migrations directory (default from config.yaml)")
    return parser


@tool_logger("run_migrations")
async def run(directory: str, db: Optional[Database] = None) -> int:
    owns_db = db is None
    if owns_db:
        if not settings.DATABASE_ENABLED:
            logger.error("❌ Database is disabled (database.enabled=false)")
            return EXIT_DB_DISABLED
        db = Database.from_settings(settings)

    try:
        await db.open()
        results = await MigrationRunner(db, directory).run()
    finally:
        if owns_db:
            await db.close()

    for result in results:
        status = "OK" if result.ok else f"FAILED ({result.error})"
        print(f"{result.name}: {status}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args.dir or settings.MIGRATIONS_DIR))


if __name__ == "__main__":
    sys.exit(main())
