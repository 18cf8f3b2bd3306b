"""
离线工具日志配置模块
为每个命令行工具创建独立的日志文件
"""
import asyncio
from functools import wraps
from pathlib import Path

from loguru import logger

# 日志文件存储目录
LOG_DIR = "logs/tools"

_configured = set()


def configure_tool_logging(tool_name: str, log_dir: str = LOG_DIR):
    """
    为工具添加专属日志文件（同一进程内只添加一次）

    只记录绑定了该 tool 上下文的日志
    """
    if tool_name in _configured:
        return
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger.add(
        f"{log_dir}/{tool_name}.log",
        rotation="10 MB",  # 日志文件达到 10MB 时轮转
        retention="7 days",  # 保留 7 天
        compression="zip",  # 压缩旧日志
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
        level="DEBUG",
        filter=lambda record, tool=tool_name: record["extra"].get("tool") == tool
    )
    _configured.add(tool_name)


def tool_logger(tool_name: str):
    """
    装饰器：为工具入口添加专属日志上下文

    用法:
        @tool_logger("ingest_events")
        async def run(args):
            pass
    """
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            configure_tool_logging(tool_name)
            # 绑定工具名到日志上下文
            with logger.contextualize(tool=tool_name):
                logger.info(f"🚀 Starting {tool_name}")
                try:
                    result = await func(*args, **kwargs)
                    logger.info(f"✅ Finished {tool_name} (exit {result})")
                    return result
                except Exception as e:
                    logger.error(f"❌ Failed {tool_name}: {e}")
                    raise

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            configure_tool_logging(tool_name)
            with logger.contextualize(tool=tool_name):
                logger.info(f"🚀 Starting {tool_name}")
                try:
                    result = func(*args, **kwargs)
                    logger.info(f"✅ Finished {tool_name} (exit {result})")
                    return result
                except Exception as e:
                    logger.error(f"❌ Failed {tool_name}: {e}")
                    raise

        # 根据函数类型返回对应的包装器
        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        else:
            return sync_wrapper

    return decorator
