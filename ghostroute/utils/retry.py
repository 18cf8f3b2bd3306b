"""
重试装饰器（仅用于外部 HTTP 服务调用）
"""

import asyncio
import functools

from loguru import logger


def async_retry(max_attempts=3, delay=1.0, backoff=2.0, exceptions=(Exception,)):
    """
    异步函数重试装饰器

    Args:
        max_attempts: 最大重试次数（包括首次尝试）
        delay: 初始延迟时间（秒）
        backoff: 延迟时间的指数退避因子
        exceptions: 需要重试的异常类型元组

    Example:
        @async_retry(max_attempts=2, delay=0.5)
        async def api_call():
            response = await client.post(...)
            return response
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.error(f"❌ {func.__name__} failed after {max_attempts} attempts: {e}")
                        raise

                    logger.warning(
                        f"⚠️  {func.__name__} attempt {attempt} failed: {e}, retrying in {current_delay:.1f}s..."
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff

        return wrapper
    return decorator
