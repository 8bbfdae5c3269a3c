"""Catalog endpoints: languages and upload limits."""

from fastapi import APIRouter, Depends

from vidlingo.api.dependencies import get_app_settings
from vidlingo.config import Settings
from vidlingo.languages import SUPPORTED_LANGUAGES, default_languages

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.get("/languages")
async def list_languages():
    """All languages available as source or target."""
    source, target = default_languages()
    return {
        "languages": [lang.model_dump() for lang in SUPPORTED_LANGUAGES],
        "default_source": source.code,
        "default_target": target.code,
    }


@router.get("/upload-limits")
async def upload_limits(settings: Settings = Depends(get_app_settings)):
    """Accepted video types and the size ceiling, for client-side checks."""
    return {
        "accepted_mime_types": settings.accepted_mime_types,
        "max_size_mb": settings.upload_max_size_mb,
    }
