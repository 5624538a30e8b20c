"""Local filesystem storage for uploaded photos."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from config import settings

logger = logging.getLogger(__name__)


_EXTENSIONS = {
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def infer_extension(content_type: str) -> str:
    return _EXTENSIONS.get((content_type or "").split(";", 1)[0].strip().lower(), "jpg")


class LocalPhotoStorage:
    """Stores bytes under a root directory and hands back relative locators."""

    def __init__(self, root_dir: str):
        self.root = Path(root_dir).expanduser().resolve()

    def _resolve(self, locator: str) -> Path:
        path = (self.root / locator).resolve()
        if path != self.root and self.root not in path.parents:
            raise ValueError(f"Locator escapes storage root: {locator}")
        return path

    def store(self, data: bytes, content_type: str, *, prefix: str) -> str:
        safe_prefix = "".join(ch for ch in str(prefix) if ch.isalnum() or ch in "-_") or "misc"
        locator = f"{safe_prefix}/{uuid.uuid4().hex}.{infer_extension(content_type)}"
        path = self._resolve(locator)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return locator

    def retrieve(self, locator: str) -> bytes:
        path = self._resolve(locator)
        if not path.is_file():
            raise FileNotFoundError(locator)
        return path.read_bytes()

    def delete(self, locator: str) -> None:
        try:
            self._resolve(locator).unlink(missing_ok=True)
        except (OSError, ValueError) as exc:
            logger.warning("Could not delete stored photo %s: %s", locator, exc)


def get_photo_storage() -> LocalPhotoStorage:
    return LocalPhotoStorage(settings.UPLOAD_DIR)
