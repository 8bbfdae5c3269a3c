"""Tests for MediaStore."""

import io
import os
from unittest.mock import patch

import pytest

from vidlingo.models.errors import ResourceError
from vidlingo.storage.media_store import MEDIA_URL_PREFIX, MediaStore, guess_content_type


class TestMediaStore:
    @pytest.fixture
    def store(self, tmp_path):
        return MediaStore(tmp_path / "media")

    def test_save_upload_bytes(self, store):
        asset = store.save_upload("s1", "Clip.MP4", "video/mp4", b"abc")
        assert asset.size_bytes == 3
        assert asset.path.suffix == ".mp4"
        assert asset.path.parent.name == "s1"

    def test_save_upload_stream(self, store):
        asset = store.save_upload("s1", "clip.webm", "video/webm", io.BytesIO(b"abcd"))
        assert asset.path.read_bytes() == b"abcd"

    def test_publish_and_resolve(self, store):
        url = store.publish("s1", b"RIFF", "audio/wav", ".wav")
        assert url.startswith(f"{MEDIA_URL_PREFIX}/s1/")
        path, content_type = store.resolve(url)
        assert path.read_bytes() == b"RIFF"
        assert content_type == "audio/wav"

    def test_revoke_deletes_file(self, store):
        url = store.publish("s1", b"RIFF", "audio/wav", ".wav")
        path, _ = store.resolve(url)
        store.revoke(url)
        assert not path.exists()
        with pytest.raises(ResourceError):
            store.resolve(url)

    def test_revoke_is_idempotent(self, store):
        url = store.publish("s1", b"RIFF", "audio/wav", ".wav")
        store.revoke(url)
        store.revoke(url)
        store.revoke(None)

    def test_unknown_url(self, store):
        with pytest.raises(ResourceError, match="not found"):
            store.resolve(f"{MEDIA_URL_PREFIX}/s1/missing.wav")

    def test_cleanup_session(self, store, tmp_path):
        url = store.publish("s1", b"RIFF", "audio/wav", ".wav")
        other = store.publish("s2", b"RIFF", "audio/wav", ".wav")
        store.cleanup_session("s1")
        assert not (tmp_path / "media" / "s1").exists()
        with pytest.raises(ResourceError):
            store.resolve(url)
        store.resolve(other)

    def test_url_from_another_store_resolves(self, store, tmp_path):
        url = store.publish("process-1", b"RIFF", "audio/wav", ".wav")
        other = MediaStore(tmp_path / "media")
        path, content_type = other.resolve(url)
        assert path.read_bytes() == b"RIFF"
        assert content_type == "audio/wav"

    def test_upload_from_another_store_resolves_as_video(self, store, tmp_path):
        asset = store.save_upload("s1", "clip.webm", "video/webm", b"abcd")
        url = store.register("s1", asset.path, "video/webm")
        _, content_type = MediaStore(tmp_path / "media").resolve(url)
        assert content_type == "video/webm"

    def test_revoke_from_another_store(self, store, tmp_path):
        url = store.publish("process-1", b"RIFF", "audio/wav", ".wav")
        path, _ = store.resolve(url)
        MediaStore(tmp_path / "media").revoke(url)
        assert not path.exists()
        with pytest.raises(ResourceError):
            store.resolve(url)

    @pytest.mark.parametrize(
        "url",
        [
            f"{MEDIA_URL_PREFIX}/../secret.wav",
            f"{MEDIA_URL_PREFIX}/s1/../../secret.wav",
            f"{MEDIA_URL_PREFIX}/s1",
            "/etc/passwd",
        ],
    )
    def test_paths_outside_store_not_resolved(self, store, tmp_path, url):
        (tmp_path / "secret.wav").write_bytes(b"RIFF")
        with pytest.raises(ResourceError):
            store.resolve(url)

    def test_cleanup_expired(self, store, tmp_path):
        with patch("vidlingo.storage.media_store.time") as clock:
            clock.time.return_value = 1000.0
            old = store.publish("process-a", b"RIFF", "audio/wav", ".wav")
            store.session_dir("s1")
            clock.time.return_value = 1100.0
            new = store.publish("process-b", b"RIFF", "audio/wav", ".wav")
            assert store.cleanup_expired(60, prefix="process-") == 1

        assert not (tmp_path / "media" / "process-a").exists()
        assert (tmp_path / "media" / "s1").exists()
        with pytest.raises(ResourceError):
            store.resolve(old)
        store.resolve(new)

    def test_cleanup_expired_ages_untracked_dirs_by_mtime(self, store, tmp_path):
        stale = tmp_path / "media" / "process-stale"
        stale.mkdir()
        os.utime(stale, (0, 0))
        store.session_dir("process-live")
        assert store.cleanup_expired(60, prefix="process-") == 1
        assert not stale.exists()
        assert (tmp_path / "media" / "process-live").exists()


class TestGuessContentType:
    def test_audio(self):
        assert guess_content_type("abc.wav") == "audio/wav"
        assert guess_content_type("abc.mp3") == "audio/mpeg"
        assert guess_content_type("abc.ogg") == "audio/ogg"

    def test_uploads_are_video(self):
        assert guess_content_type("upload-abc.mp4") == "video/mp4"
        assert guess_content_type("upload-abc.ogg") == "video/ogg"

    def test_unknown(self):
        assert guess_content_type("abc.xyz") == "application/octet-stream"
