"""Tests for upload validators."""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from vidlingo.extractors.validators import (
    find_audio_stream,
    probe_media,
    validate_media_size,
    validate_media_type,
    validate_upload,
)
from vidlingo.models.errors import ValidationError

MB = 1024 * 1024


class TestValidateMediaType:
    @pytest.mark.parametrize("content_type", ["video/mp4", "video/webm", "video/ogg"])
    def test_accepted_types(self, content_type):
        validate_media_type(content_type)

    def test_codec_parameters_ignored(self):
        validate_media_type("video/webm;codecs=vp9,opus")

    def test_case_insensitive(self):
        validate_media_type("Video/MP4")

    @pytest.mark.parametrize("content_type", ["video/quicktime", "audio/mpeg", "text/plain", ""])
    def test_rejected_types(self, content_type):
        with pytest.raises(ValidationError, match="Invalid file type"):
            validate_media_type(content_type)

    def test_custom_allow_list(self):
        validate_media_type("video/quicktime", accepted=["video/quicktime"])


class TestValidateMediaSize:
    def test_within_limit(self):
        validate_media_size(10 * MB)

    def test_exactly_at_limit(self):
        validate_media_size(100 * MB)

    def test_exceeds_limit(self):
        with pytest.raises(ValidationError, match="Maximum size is 100MB") as exc_info:
            validate_media_size(150 * MB)
        assert exc_info.value.details["max_mb"] == 100

    def test_custom_limit(self):
        with pytest.raises(ValidationError, match="Maximum size is 1MB"):
            validate_media_size(2 * MB, max_size_mb=1)

    def test_empty(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_media_size(0)

    def test_validate_upload_checks_type_first(self):
        with pytest.raises(ValidationError, match="Invalid file type"):
            validate_upload("video/avi", 150 * MB)


class TestProbeMedia:
    def test_file_not_found(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            probe_media(tmp_path / "missing.mp4")

    def test_parses_streams(self, tmp_path):
        f = tmp_path / "clip.mp4"
        f.write_bytes(b"\x00" * 100)
        output = {"streams": [{"codec_type": "video"}, {"codec_type": "audio", "index": 1}]}
        with patch("vidlingo.extractors.validators.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(output), stderr="")
            probe = probe_media(f)
        assert find_audio_stream(probe) == {"codec_type": "audio", "index": 1}

    def test_corrupted_file(self, tmp_path):
        f = tmp_path / "bad.mp4"
        f.write_bytes(b"not a video")
        with patch("vidlingo.extractors.validators.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1, stdout="", stderr="Invalid data")
            with pytest.raises(ValidationError, match="corrupted"):
                probe_media(f)

    def test_no_streams(self, tmp_path):
        f = tmp_path / "empty.mp4"
        f.write_bytes(b"\x00")
        with patch("vidlingo.extractors.validators.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout='{"streams": []}', stderr="")
            with pytest.raises(ValidationError, match="No media streams"):
                probe_media(f)

    def test_ffprobe_missing(self, tmp_path):
        f = tmp_path / "clip.mp4"
        f.write_bytes(b"\x00")
        with patch("vidlingo.extractors.validators.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(ValidationError, match="ffprobe not found"):
                probe_media(f)

    def test_timeout(self, tmp_path):
        f = tmp_path / "clip.mp4"
        f.write_bytes(b"\x00")
        with patch(
            "vidlingo.extractors.validators.subprocess.run",
            side_effect=subprocess.TimeoutExpired("ffprobe", 30),
        ):
            with pytest.raises(ValidationError, match="timed out"):
                probe_media(f)

    def test_no_audio_stream(self):
        assert find_audio_stream({"streams": [{"codec_type": "video"}]}) is None
