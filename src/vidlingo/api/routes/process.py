"""One-shot processing endpoint."""

from fastapi import APIRouter, Depends

from vidlingo.api.dependencies import get_session_manager
from vidlingo.models.pipeline import ProcessVideoRequest, ProcessVideoResult
from vidlingo.pipeline.manager import SessionManager

router = APIRouter(prefix="/api/v1", tags=["process"])


@router.post("/process-video", response_model=ProcessVideoResult)
async def process_video(
    request: ProcessVideoRequest,
    manager: SessionManager = Depends(get_session_manager),
):
    """Transcribe, translate and dub a video by URL, falling back to mock text on failure."""
    return await manager.service.process_video(request)
