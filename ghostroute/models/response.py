"""
统一响应模型
"""

from typing import Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """错误响应"""
    success: bool = Field(False, description="请求失败")
    code: int = Field(..., description="错误码")
    message: str = Field(..., description="错误信息")
    error: Optional[dict] = Field(None, description="错误详情（含稳定的 kind 字段）")

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "code": 400,
                "message": "Batch rejected with 1 violation(s)",
                "error": {
                    "kind": "ValidationError",
                    "count": 1,
                    "violations": [
                        {
                            "kind": "MissingFieldError",
                            "field": "misc_data",
                            "index": 3
                        }
                    ]
                }
            }
        }
