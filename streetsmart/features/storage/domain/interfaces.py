from abc import ABC, abstractmethod


class IObjectStorage(ABC):
    """
    Contract for the blob store holding raw uploads and processed clips.
    Keys are slash-separated object paths, e.g. 'raw-videos/<owner>/<file>'.
    """

    @abstractmethod
    def download(self, key: str) -> bytes:
        """
        Raises:
            DownloadError: If the object is missing or unreadable.
        """
        pass

    @abstractmethod
    def upload(self, key: str, data: bytes) -> None:
        """
        Stores the object, replacing any previous version under the same key.

        Raises:
            UploadError: If the object cannot be written.
        """
        pass
