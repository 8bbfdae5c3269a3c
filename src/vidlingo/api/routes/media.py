"""Published media endpoint."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from vidlingo.api.dependencies import get_media_store
from vidlingo.models.errors import ResourceError
from vidlingo.storage.media_store import MEDIA_URL_PREFIX, MediaStore

router = APIRouter(prefix="/api/v1", tags=["media"])


@router.get("/media/{session_id}/{name}")
async def get_media(
    session_id: str,
    name: str,
    store: MediaStore = Depends(get_media_store),
):
    """Serve a live object URL (uploaded video or synthesized audio)."""
    try:
        path, content_type = store.resolve(f"{MEDIA_URL_PREFIX}/{session_id}/{name}")
    except ResourceError as e:
        raise HTTPException(status_code=404, detail=e.message)
    return FileResponse(path=path, media_type=content_type, filename=name)
