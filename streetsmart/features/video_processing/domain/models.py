from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from streetsmart.core.common.enums import ProcessingStatus, StepOutcome
from streetsmart.features.gps_extraction.domain.models import GPSPoint, GPSTrack

T = TypeVar("T")


@dataclass(frozen=True)
class ProcessVideoRequest:
    """
    Trigger payload for one pipeline run.
    """
    video_id: UUID
    source_path: str
    owner_id: str
    camera_type: str

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.video_id:
            missing.append("video_id")
        for name in ("source_path", "owner_id", "camera_type"):
            if not str(getattr(self, name) or "").strip():
                missing.append(name)
        return missing


@dataclass(frozen=True)
class VideoAsset:
    """Detached snapshot of a video row."""
    id: UUID
    file_name: str
    file_path: str
    owner_id: str
    camera_type: str
    file_size: int
    processing_status: ProcessingStatus
    duration: Optional[float] = None
    recorded_at: Optional[datetime] = None
    raw_metadata: Optional[Dict[str, Any]] = None
    processing_error: Optional[str] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class VideoMetadataUpdate:
    duration: float
    recorded_at: datetime
    raw_metadata: Dict[str, Any]
    start_point: Optional[GPSPoint] = None
    end_point: Optional[GPSPoint] = None

    @classmethod
    def from_track(cls, duration: float, recorded_at: datetime,
                   raw_metadata: Dict[str, Any], track: GPSTrack) -> "VideoMetadataUpdate":
        return cls(
            duration=duration,
            recorded_at=recorded_at,
            raw_metadata=raw_metadata,
            start_point=track[0] if track else None,
            end_point=track[-1] if track else None
        )


@dataclass(frozen=True)
class ClipRecord:
    """
    One persisted segment. (video_id, clip_index) is unique.
    """
    video_id: UUID
    clip_index: int
    clip_file_path: str
    duration: float
    owner_id: str
    gps_records: List[GPSPoint] = field(default_factory=list)


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """
    Outcome of a pipeline step that is allowed to degrade.
    A soft-failed step still carries a usable (fallback) value.
    """
    value: T
    outcome: StepOutcome = StepOutcome.OK
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome == StepOutcome.OK


@dataclass
class ProcessingResult:
    """Summary returned to the trigger surface."""
    video_id: UUID
    status: ProcessingStatus
    gps_point_count: int = 0
    clip_count: int = 0
    error: Optional[str] = None
    soft_failures: List[str] = field(default_factory=list)
