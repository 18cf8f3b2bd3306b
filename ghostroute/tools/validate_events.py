"""
校验事件 JSON 文件（不连接数据库）

用法:
    python -m ghostroute.tools.validate_events data/chapter1.json

退出码: 0 通过, 1 用法错误, 2 JSON 无法解析, 3 顶层不是数组, 4 存在违规项
"""

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from ghostroute.logger_config import tool_logger
from ghostroute.services import validate_events

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_BAD_JSON = 2
EXIT_NOT_ARRAY = 3
EXIT_VIOLATIONS = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate an events JSON file")
    parser.add_argument("file", help="path to a JSON array of events")
    return parser


@tool_logger("validate_events")
def run(path: str) -> int:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        logger.error(f"❌ Cannot read {path}: {e}")
        return EXIT_USAGE
    except json.JSONDecodeError as e:
        logger.error(f"❌ Invalid JSON in {path}: {e}")
        return EXIT_BAD_JSON

    if not isinstance(data, list):
        logger.error("❌ Top-level JSON must be an array of events")
        return EXIT_NOT_ARRAY

    report = validate_events(data, strict=True)
    if not report.ok:
        for violation in report.violations:
            logger.error(f"❌ {violation.kind}: {violation.message}")
        logger.error(f"❌ {len(report.violations)} violation(s) in {report.total} event(s)")
        return EXIT_VIOLATIONS

    logger.success(f"✅ {report.total} event(s) passed validation")
    for action, count in sorted(report.action_counts.items()):
        print(f"{action}: {count}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args.file)


if __name__ == "__main__":
    sys.exit(main())
