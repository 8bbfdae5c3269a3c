"""Uploaded media handle."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class MediaAsset(BaseModel):
    """A user-selected video stored in a temporary file."""

    filename: str = Field(..., min_length=1)
    content_type: str
    size_bytes: int = Field(..., ge=0)
    path: Path

    def release(self) -> None:
        """Delete the backing temp file."""
        if self.path.exists():
            self.path.unlink(missing_ok=True)
            logger.info(f"Released media asset {self.filename}")
