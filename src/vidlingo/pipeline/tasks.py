"""Celery task definitions."""

import asyncio

from celery import Celery

from vidlingo.config import get_settings
from vidlingo.models.pipeline import ProcessVideoRequest

settings = get_settings()

celery_app = Celery(
    "vidlingo",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
)


async def _process(request: ProcessVideoRequest) -> dict:
    from vidlingo.gateway.client import InferenceGateway
    from vidlingo.pipeline.service import TranslationService
    from vidlingo.storage.media_store import MediaStore

    async with InferenceGateway() as gateway:
        service = TranslationService(gateway, MediaStore())
        result = await service.process_video(request)
    return result.model_dump()


@celery_app.task(bind=True, name="vidlingo.process_video")
def process_video_task(
    self,
    video_url: str,
    source_language: str,
    target_language: str,
):
    """Celery task wrapping TranslationService.process_video()."""
    request = ProcessVideoRequest(
        video_url=video_url,
        source_language=source_language,
        target_language=target_language,
    )
    try:
        return asyncio.run(_process(request))
    except Exception as e:
        return {
            "status": "failed",
            "error": str(e),
        }
