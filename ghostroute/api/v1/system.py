"""
系统路由
"""

import time

from fastapi import APIRouter

router = APIRouter()


@router.get("/ping")
async def ping():
    """存活检查"""
    return {"ok": True, "ts": int(time.time() * 1000)}
