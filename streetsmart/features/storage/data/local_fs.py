import logging
from pathlib import Path
from typing import Optional

from streetsmart.core.config.settings import settings
from streetsmart.core.common.errors import DownloadError, UploadError
from ..domain.interfaces import IObjectStorage
from ..domain.models import ObjectKey

logger = logging.getLogger(__name__)


class LocalObjectStorage(IObjectStorage):
    """
    Object storage backed by a directory: key 'a/b/c.mp4' lives at
    STORAGE_DIR/a/b/c.mp4.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = Path(root) if root is not None else settings.STORAGE_DIR

    def _resolve(self, key: str) -> Path:
        return self.root / str(ObjectKey(key))

    def download(self, key: str) -> bytes:
        try:
            path = self._resolve(key)
            return path.read_bytes()
        except ValueError as e:
            raise DownloadError(f"Failed to download file: {e}") from e
        except OSError as e:
            raise DownloadError(f"Failed to download file {key}: {e.strerror or e}") from e

    def upload(self, key: str, data: bytes) -> None:
        try:
            destination = self._resolve(key)
            destination.parent.mkdir(parents=True, exist_ok=True)
            # Write-then-rename so readers never see a half-written clip
            partial = destination.with_name(destination.name + ".part")
            partial.write_bytes(data)
            partial.replace(destination)
        except ValueError as e:
            raise UploadError(f"Failed to upload file: {e}") from e
        except OSError as e:
            raise UploadError(f"Failed to upload file {key}: {e.strerror or e}") from e

        logger.debug(f"Stored {len(data)} bytes at {key}")
