"""
迁移脚本执行器

按文件名字典序执行 migrations/ 下的 .sql 脚本。不记录已执行的脚本，
每个脚本都必须自身幂等；单个脚本失败只记录日志，不影响后续脚本。
"""

from pathlib import Path
from typing import List, Optional

from loguru import logger

from ghostroute.db.base import Database
from ghostroute.models import MigrationResult


def split_statements(sql: str) -> List[str]:
    """
    把脚本拆成单条语句

    识别单引号字符串、双引号标识符和 -- 行注释，其中的分号不作为分隔符
    """
    statements: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    i = 0

    while i < len(sql):
        ch = sql[i]
        if quote:
            current.append(ch)
            if ch == quote:
                # 连续两个引号是转义
                if i + 1 < len(sql) and sql[i + 1] == quote:
                    current.append(sql[i + 1])
                    i += 1
                else:
                    quote = None
        elif ch in ("'", '"'):
            quote = ch
            current.append(ch)
        elif ch == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end == -1 else end
            continue
        elif ch == ";":
            statement = "".join(current).strip()
            if statement:
                statements.append(statement)
            current = []
        else:
            current.append(ch)
        i += 1

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)
    return statements


def discover(directory: Path) -> List[Path]:
    """按文件名字典序列出 .sql 脚本（文件名需零填充序号）"""
    if not directory.is_dir():
        return []
    return sorted((p for p in directory.iterdir() if p.is_file() and p.suffix == ".sql"), key=lambda p: p.name)


class MigrationRunner:
    """迁移执行器"""

    def __init__(self, db: Database, directory: str):
        self.db = db
        self.directory = Path(directory)

    async def run(self) -> List[MigrationResult]:
        """
        依次执行所有脚本，每个脚本一个事务，每个脚本恰好尝试一次

        Returns:
            每个脚本的执行结果
        """
        scripts = discover(self.directory)
        if not scripts:
            logger.info(f"📦 No migrations found in {self.directory}")
            return []

        results = []
        for script in scripts:
            results.append(await self._apply(script))

        failed = [r.name for r in results if not r.ok]
        if failed:
            logger.warning(f"⚠️  {len(failed)} migration(s) failed: {', '.join(failed)}")
        else:
            logger.success(f"✅ Applied {len(results)} migration(s)")
        return results

    async def _apply(self, script: Path) -> MigrationResult:
        logger.info(f"📦 Applying {script.name}")
        try:
            statements = split_statements(script.read_text(encoding="utf-8"))
            async def work(session):
                conn = await session.connection()
                for statement in statements:
                    await conn.exec_driver_sql(statement)

            await self.db.run_in_transaction(work, lock_partition=False)
        except Exception as e:
            logger.error(f"❌ Failed {script.name}: {e}")
            return MigrationResult(name=script.name, ok=False, error=str(e))

        logger.info(f"✅ OK {script.name}")
        return MigrationResult(name=script.name, ok=True, statements=len(statements))
