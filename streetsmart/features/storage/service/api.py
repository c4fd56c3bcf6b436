import logging
from pathlib import Path
from typing import Optional

from streetsmart.core.common.errors import DownloadError, UploadError

from ..domain.interfaces import IObjectStorage
from ..data.local_fs import LocalObjectStorage

logger = logging.getLogger(__name__)


class StorageService:
    """
    Facade for the Storage Feature.
    Moves objects between the blob store and local scratch files.
    """
    def __init__(self, backend: Optional[IObjectStorage] = None):
        self.backend = backend or LocalObjectStorage()

    def download_to(self, key: str, destination: Path) -> Path:
        """
        Fetches an object into a local file.

        Raises:
            DownloadError: If the object cannot be fetched.
        """
        data = self.backend.download(key)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as e:
            raise DownloadError(f"Failed to write downloaded file {destination.name}: {e}") from e
        logger.info(f"Downloaded {key} ({len(data)} bytes) to {destination}")
        return destination

    def upload_file(self, key: str, source: Path) -> str:
        """
        Uploads a local file and returns the key it was stored under.

        Raises:
            UploadError: If the file cannot be read or stored.
        """
        try:
            data = source.read_bytes()
        except OSError as e:
            raise UploadError(f"Failed to read clip {source.name}: {e}") from e
        self.backend.upload(key, data)
        return key


# Singleton Instance for easy import
storage = StorageService()
