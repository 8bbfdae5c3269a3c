"""Translation session endpoints."""

from fastapi import APIRouter, BackgroundTasks, Depends, UploadFile
from pydantic import BaseModel

from vidlingo.api.dependencies import get_session_manager
from vidlingo.models.errors import ValidationError
from vidlingo.models.pipeline import STAGE_INFO
from vidlingo.pipeline.manager import SessionManager
from vidlingo.pipeline.orchestrator import PipelineOrchestrator

router = APIRouter(prefix="/api/v1", tags=["sessions"])


class LanguageSelection(BaseModel):
    source_language: str | None = None
    target_language: str | None = None


def session_view(orchestrator: PipelineOrchestrator) -> dict:
    state = orchestrator.snapshot()
    return {
        "session_id": orchestrator.session_id,
        "state": state.model_dump(mode="json", exclude={"video_asset"}),
        "video": (
            {
                "filename": state.video_asset.filename,
                "content_type": state.video_asset.content_type,
                "size_bytes": state.video_asset.size_bytes,
            }
            if state.video_asset
            else None
        ),
        "stage_info": STAGE_INFO[state.stage].model_dump(),
        "steps": [step.model_dump(mode="json") for step in orchestrator.process_steps()],
        "can_translate": orchestrator.can_translate(),
    }


@router.post("/sessions")
async def create_session(manager: SessionManager = Depends(get_session_manager)):
    """Open a new translation session."""
    return session_view(manager.create_session())


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """Current state, derived steps and readiness of a session."""
    return session_view(manager.get_session(session_id))


@router.post("/sessions/{session_id}/video")
async def upload_video(
    session_id: str,
    file: UploadFile,
    manager: SessionManager = Depends(get_session_manager),
):
    """Attach a video to a session after type and size validation."""
    if not file.filename:
        raise ValidationError("No filename provided")
    orchestrator = manager.get_session(session_id)
    size = file.size
    if size is None:
        file.file.seek(0, 2)
        size = file.file.tell()
        file.file.seek(0)
    orchestrator.select_video(file.filename, file.content_type or "", file.file, size_bytes=size)
    return session_view(orchestrator)


@router.put("/sessions/{session_id}/languages")
async def select_languages(
    session_id: str,
    selection: LanguageSelection,
    manager: SessionManager = Depends(get_session_manager),
):
    """Pick source and/or target language; fields left out keep their value."""
    orchestrator = manager.get_session(session_id)
    if "source_language" in selection.model_fields_set:
        orchestrator.set_source_language(selection.source_language)
    if "target_language" in selection.model_fields_set:
        orchestrator.set_target_language(selection.target_language)
    return session_view(orchestrator)


@router.post("/sessions/{session_id}/translate")
async def start_translation(
    session_id: str,
    background_tasks: BackgroundTasks,
    manager: SessionManager = Depends(get_session_manager),
):
    """Start the pipeline in the background when the session is ready."""
    orchestrator = manager.get_session(session_id)
    started = orchestrator.can_translate()
    if started:
        background_tasks.add_task(manager.start, session_id)
    return {**session_view(orchestrator), "started": started}


@router.post("/sessions/{session_id}/reset")
async def reset_session(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """Abort any run, release media and return to the initial state."""
    manager.reset(session_id)
    return session_view(manager.get_session(session_id))


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str, manager: SessionManager = Depends(get_session_manager)):
    """Delete a session and all of its media."""
    manager.get_session(session_id)
    manager.delete_session(session_id)
    return {"session_id": session_id, "status": "deleted"}
