"""Tests for the Celery task wrapper."""

from unittest.mock import AsyncMock, patch

from vidlingo.pipeline.tasks import celery_app, process_video_task


class TestProcessVideoTask:
    def test_registered(self):
        assert "vidlingo.process_video" in celery_app.tasks
        assert celery_app.conf.task_serializer == "json"

    def test_returns_result_payload(self):
        payload = {"message": "Video processed successfully", "degraded": False}
        with patch("vidlingo.pipeline.tasks._process", new=AsyncMock(return_value=payload)) as proc:
            result = process_video_task.run("https://cdn.test/v.mp4", "en", "es")
        assert result == payload
        request = proc.call_args[0][0]
        assert request.video_url == "https://cdn.test/v.mp4"
        assert request.target_language == "es"

    def test_failure_is_reported(self):
        with patch(
            "vidlingo.pipeline.tasks._process", new=AsyncMock(side_effect=RuntimeError("boom"))
        ):
            result = process_video_task.run("https://cdn.test/v.mp4", "en", "es")
        assert result == {"status": "failed", "error": "boom"}
