from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from streetsmart.core.common.enums import ProcessingStatus
from .models import ClipRecord, VideoAsset, VideoMetadataUpdate


class IVideoRepository(ABC):
    """
    Contract for video/clip persistence.
    The pipeline's only channel for cross-run coordination.
    """

    @abstractmethod
    def register_upload(self, file_name: str, file_path: str, owner_id: str,
                        camera_type: str, file_size: int) -> UUID:
        """Creates a video row in UNPROCESSED state once an upload completes."""
        pass

    @abstractmethod
    def get_video(self, video_id: UUID) -> Optional[VideoAsset]:
        pass

    @abstractmethod
    def update_video_status(self, video_id: UUID, status: ProcessingStatus,
                            error: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def update_video_metadata(self, video_id: UUID, update: VideoMetadataUpdate) -> None:
        """
        Raises:
            PersistenceError: If the write fails.
        """
        pass

    @abstractmethod
    def insert_clip(self, record: ClipRecord) -> None:
        """
        Inserts the clip, or replaces the existing row for the same
        (video_id, clip_index).

        Raises:
            PersistenceError: If the write fails.
        """
        pass

    @abstractmethod
    def list_clips(self, video_id: UUID) -> List[ClipRecord]:
        pass

    @abstractmethod
    def find_stale_processing(self, older_than: timedelta) -> List[UUID]:
        """Videos stuck in PROCESSING whose last update is older than `older_than`."""
        pass
