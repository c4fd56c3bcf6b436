import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, Integer, BigInteger, Float, Boolean, DateTime, ForeignKey,
    Enum as SQLEnum, JSON, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.dialects.postgresql import UUID
from streetsmart.core.database.base import Base
from streetsmart.core.common.enums import ProcessingStatus, AnalysisStatus


def utc_now():
    return datetime.now(timezone.utc)


class VideoAssetModel(Base):
    """
    One uploaded dash-cam video.
    Created when the upload completes, mutated only by the processing pipeline.
    """
    __tablename__ = "video_metadata"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False, index=True)
    owner_id = Column(String, nullable=False, index=True)
    camera_type = Column(String, nullable=False, index=True)
    file_size = Column(BigInteger, nullable=False)

    # Filled in by the pipeline
    duration = Column(Float, nullable=True)
    recorded_at = Column(DateTime(timezone=True), nullable=True, index=True)
    raw_metadata = Column(JSON, nullable=True)

    start_latitude = Column(Float, nullable=True)
    start_longitude = Column(Float, nullable=True)
    end_latitude = Column(Float, nullable=True)
    end_longitude = Column(Float, nullable=True)

    processing_status = Column(
        SQLEnum(ProcessingStatus), default=ProcessingStatus.UNPROCESSED, nullable=False, index=True
    )
    processing_error = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    clips = relationship(
        "VideoClipModel",
        back_populates="video",
        cascade="all, delete-orphan",
        order_by="VideoClipModel.clip_index"
    )


class VideoClipModel(Base):
    """
    A fixed-length segment of a video plus the GPS samples recorded during it.
    """
    __tablename__ = "video_clips"
    __table_args__ = (
        UniqueConstraint("video_id", "clip_index", name="uq_video_clips_video_index"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    video_id = Column(UUID(as_uuid=True), ForeignKey("video_metadata.id", ondelete="CASCADE"), nullable=False, index=True)
    clip_index = Column(Integer, nullable=False)
    clip_file_path = Column(String, nullable=False)
    duration = Column(Float, nullable=False)

    # [{"timestamp": iso8601, "latitude": float, "longitude": float}, ...]
    gps_records = Column(JSON, default=list)

    # Written by the downstream detector, never by the pipeline
    pothole_detected = Column(Boolean, default=False, nullable=False, index=True)
    ml_analysis_status = Column(SQLEnum(AnalysisStatus), default=AnalysisStatus.PENDING, nullable=False, index=True)

    owner_id = Column(String, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    video = relationship("VideoAssetModel", back_populates="clips")
