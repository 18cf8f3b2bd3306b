"""
音频路由 - 上传、文本转语音、批量音频日志
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ghostroute.api.deps import get_audio_service
from ghostroute.models import AudioLogBatchRequest, AudioUpload, TtsRequest
from ghostroute.services import AudioService

router = APIRouter()


@router.post("/audio")
async def upload_audio(
    data: AudioUpload,
    service: AudioService = Depends(get_audio_service)
):
    """保存 base64 音频，返回公开地址"""
    return await service.save_upload(data.file_name, data.base64)


@router.post("/tts")
async def text_to_speech(
    data: TtsRequest,
    service: AudioService = Depends(get_audio_service)
):
    """
    文本转语音

    - 未配置 Key 或合成失败时返回静音占位（stub=true）
    """
    return await service.synthesize(data.text, data.voice, data.file_name)


@router.post("/audioLogs/batch")
async def audio_logs_batch(
    data: AudioLogBatchRequest,
    service: AudioService = Depends(get_audio_service)
):
    """
    批量生成音频日志

    - 逐条返回结果；部分失败时返回 207 并附带 PartialFailureError
    """
    result = await service.synthesize_batch(data.logs, data.include_events, data.chapter)
    return JSONResponse(status_code=200 if result["ok"] else 207, content=result)
