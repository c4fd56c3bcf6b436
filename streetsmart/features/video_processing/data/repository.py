import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from streetsmart.core.database.connection import SessionLocal
from streetsmart.core.common.enums import ProcessingStatus
from streetsmart.core.common.errors import PersistenceError
from streetsmart.features.gps_extraction.domain.models import GPSPoint
from ..domain.interfaces import IVideoRepository
from ..domain.models import ClipRecord, VideoAsset, VideoMetadataUpdate
from .sql_models import VideoAssetModel, VideoClipModel

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlVideoRepository(IVideoRepository):

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory

    def register_upload(self, file_name: str, file_path: str, owner_id: str,
                        camera_type: str, file_size: int) -> UUID:
        with self.session_factory() as db:
            try:
                video = VideoAssetModel(
                    file_name=file_name,
                    file_path=file_path,
                    owner_id=owner_id,
                    camera_type=camera_type,
                    file_size=file_size,
                    processing_status=ProcessingStatus.UNPROCESSED
                )
                db.add(video)
                db.commit()
                db.refresh(video)
                logger.info(f"Registered upload {video.id} ({file_name})")
                return video.id
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to register upload {file_name}: {e}") from e

    def get_video(self, video_id: UUID) -> Optional[VideoAsset]:
        with self.session_factory() as db:
            try:
                video = db.get(VideoAssetModel, video_id)
                return self._to_domain(video) if video else None
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to load video {video_id}: {e}") from e

    def update_video_status(self, video_id: UUID, status: ProcessingStatus,
                            error: Optional[str] = None) -> None:
        with self.session_factory() as db:
            try:
                video = db.get(VideoAssetModel, video_id)
                if not video:
                    raise PersistenceError(f"Video {video_id} not found")
                video.processing_status = status
                video.processing_error = error
                video.updated_at = datetime.now(timezone.utc)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to update status of video {video_id}: {e}") from e

    def update_video_metadata(self, video_id: UUID, update: VideoMetadataUpdate) -> None:
        with self.session_factory() as db:
            try:
                video = db.get(VideoAssetModel, video_id)
                if not video:
                    raise PersistenceError(f"Video {video_id} not found")

                video.duration = update.duration
                video.recorded_at = update.recorded_at
                video.raw_metadata = update.raw_metadata

                if update.start_point is not None:
                    video.start_latitude = update.start_point.latitude
                    video.start_longitude = update.start_point.longitude
                if update.end_point is not None:
                    video.end_latitude = update.end_point.latitude
                    video.end_longitude = update.end_point.longitude

                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to update video metadata: {e}") from e

    def insert_clip(self, record: ClipRecord) -> None:
        try:
            self._upsert_clip(record)
        except IntegrityError:
            # A concurrent writer won the insert; overwrite its row instead
            logger.warning(f"Clip {record.video_id}#{record.clip_index} appeared concurrently, retrying as update")
            try:
                self._upsert_clip(record)
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to persist clip {record.clip_index}: {e}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to persist clip {record.clip_index}: {e}") from e

    def _upsert_clip(self, record: ClipRecord) -> None:
        with self.session_factory() as db:
            try:
                clip = db.query(VideoClipModel).filter_by(
                    video_id=record.video_id,
                    clip_index=record.clip_index
                ).first()

                if clip is None:
                    clip = VideoClipModel(video_id=record.video_id, clip_index=record.clip_index)
                    db.add(clip)

                clip.clip_file_path = record.clip_file_path
                clip.duration = record.duration
                clip.owner_id = record.owner_id
                clip.gps_records = [p.to_dict() for p in record.gps_records]
                db.commit()
            except SQLAlchemyError:
                db.rollback()
                raise

    def list_clips(self, video_id: UUID) -> List[ClipRecord]:
        with self.session_factory() as db:
            try:
                rows = (
                    db.query(VideoClipModel)
                    .filter(VideoClipModel.video_id == video_id)
                    .order_by(VideoClipModel.clip_index)
                    .all()
                )
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to list clips of video {video_id}: {e}") from e
            return [
                ClipRecord(
                    video_id=row.video_id,
                    clip_index=row.clip_index,
                    clip_file_path=row.clip_file_path,
                    duration=row.duration,
                    owner_id=row.owner_id,
                    gps_records=[GPSPoint.from_dict(p) for p in (row.gps_records or [])]
                )
                for row in rows
            ]

    def find_stale_processing(self, older_than: timedelta) -> List[UUID]:
        cutoff = datetime.now(timezone.utc) - older_than
        with self.session_factory() as db:
            try:
                rows = (
                    db.query(VideoAssetModel.id)
                    .filter(
                        VideoAssetModel.processing_status == ProcessingStatus.PROCESSING,
                        VideoAssetModel.updated_at < cutoff
                    )
                    .all()
                )
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to look up stale videos: {e}") from e
            return [row.id for row in rows]

    @staticmethod
    def _to_domain(video: VideoAssetModel) -> VideoAsset:
        return VideoAsset(
            id=video.id,
            file_name=video.file_name,
            file_path=video.file_path,
            owner_id=video.owner_id,
            camera_type=video.camera_type,
            file_size=video.file_size,
            processing_status=video.processing_status,
            duration=video.duration,
            recorded_at=_as_utc(video.recorded_at),
            raw_metadata=video.raw_metadata,
            processing_error=video.processing_error,
            updated_at=_as_utc(video.updated_at)
        )
