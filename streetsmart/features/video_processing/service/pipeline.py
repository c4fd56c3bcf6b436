import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Type, TypeVar

from streetsmart.core.common.enums import ProcessingStatus, StepOutcome
from streetsmart.core.common.errors import (
    ExtractionError, PersistenceError, PipelineError, UploadError, ValidationError
)
from streetsmart.core.config.settings import settings
from streetsmart.features.gps_extraction.domain.interfaces import IGPSTrackExtractor
from streetsmart.features.gps_extraction.domain.models import GPSPoint, GPSTrack
from streetsmart.features.media_probe.domain.interfaces import IMediaProber
from streetsmart.features.storage.domain.models import ObjectKey
from streetsmart.features.storage.service.api import StorageService
from streetsmart.features.video_segmentation.domain.models import SegmentedClip
from streetsmart.features.video_segmentation.service.segmenter import Segmenter

from ..domain.interfaces import IVideoRepository
from ..domain.models import (
    ClipRecord, ProcessingResult, ProcessVideoRequest, StepResult, VideoMetadataUpdate
)
from .clip_gps import ClipGPSAssociator
from .start_time import StartTimeResolver
from .workspace import RunWorkspace

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProcessingPipeline:
    """
    Turns one uploaded video into metadata, a GPS track and GPS-tagged clips,
    driving the status machine UNPROCESSED/FAILED -> PROCESSING -> COMPLETED|FAILED.

    Fatal errors (download, probe, metadata write, segmentation) abort the run
    and mark the video FAILED with the first error message. Soft errors (GPS
    extraction, a single clip's upload or insert) are logged and the run
    carries on with less output. Scratch files never outlive the run.

    The pipeline never retries on its own; detecting stuck PROCESSING rows
    and re-invoking is up to the caller.
    """

    def __init__(self,
                 repository: IVideoRepository,
                 storage: StorageService,
                 prober: IMediaProber,
                 gps_extractor: IGPSTrackExtractor,
                 segmenter: Segmenter,
                 resolver: Optional[StartTimeResolver] = None,
                 scratch_root: Optional[Path] = None,
                 clip_prefix: Optional[str] = None,
                 camera_has_gps: Callable[[str], bool] = settings.camera_has_gps):
        self.repository = repository
        self.storage = storage
        self.prober = prober
        self.gps_extractor = gps_extractor
        self.segmenter = segmenter
        self.resolver = resolver or StartTimeResolver()
        self.associator = ClipGPSAssociator(segmenter.segment_length)
        self.scratch_root = scratch_root
        self.clip_prefix = clip_prefix or settings.CLIP_STORAGE_PREFIX
        self.camera_has_gps = camera_has_gps

    def run(self, request: ProcessVideoRequest) -> ProcessingResult:
        """
        Executes one run for one video.

        Raises:
            ValidationError: If required fields are missing or the video does
                not exist. Nothing is written in that case.
            PersistenceError: If the video row cannot be read for the guard.
                Nothing is written in that case either.
        """
        self._guard(request)

        video_id = request.video_id
        result = ProcessingResult(video_id=video_id, status=ProcessingStatus.PROCESSING)
        logger.info(f"Processing video {video_id} ({request.source_path})")

        try:
            self.repository.update_video_status(video_id, ProcessingStatus.PROCESSING, None)

            with RunWorkspace(video_id, root=self.scratch_root) as workspace:
                self._execute(request, workspace, result)

                self.repository.update_video_status(video_id, ProcessingStatus.COMPLETED, None)
                result.status = ProcessingStatus.COMPLETED

            logger.info(
                f"Video {video_id} Completed: {result.clip_count} clips, "
                f"{result.gps_point_count} GPS points, {len(result.soft_failures)} soft failures"
            )

        except PipelineError as e:
            logger.error(f"Video {video_id} Failed: {e}")
            self._mark_failed(result, str(e))

        except Exception as e:
            logger.exception(f"Video {video_id} Failed unexpectedly: {e}")
            self._mark_failed(result, str(e) or e.__class__.__name__)

        return result

    def _guard(self, request: ProcessVideoRequest) -> None:
        missing = request.missing_fields()
        if missing:
            raise ValidationError(f"Missing required parameters: {', '.join(missing)}")
        if self.repository.get_video(request.video_id) is None:
            raise ValidationError(f"Video {request.video_id} not found")

    def _execute(self, request: ProcessVideoRequest, workspace: RunWorkspace,
                 result: ProcessingResult) -> None:
        video_id = request.video_id

        # 1. Download (fatal)
        source = workspace.source_file(Path(request.source_path).suffix.lower())
        self.storage.download_to(request.source_path, source)

        # 2. Probe (fatal)
        probe = self.prober.probe(source)

        # 3. GPS (soft)
        gps_step = self._extract_gps(request, source)
        self._record(result, gps_step)
        track = gps_step.value
        result.gps_point_count = len(track)

        # 4. Start time + metadata write (fatal)
        recorded_at = self.resolver.resolve(probe.tags, track)
        self.repository.update_video_metadata(
            video_id,
            VideoMetadataUpdate.from_track(probe.duration_seconds, recorded_at, probe.raw, track)
        )

        # 5. Segment (fatal)
        clips = self.segmenter.segment(source, workspace.clips_dir, str(video_id))

        # 6. Per-clip GPS, upload and insert (soft per clip)
        subsets = self.associator.associate(recorded_at, clips, track)
        for clip in clips:
            clip_step = self._soft_step(
                f"clip {clip.index}",
                lambda clip=clip: self._store_clip(request, clip, subsets[clip.index]),
                fallback=None,
                soft_errors=(UploadError, PersistenceError)
            )
            self._record(result, clip_step)
            if clip_step.ok:
                result.clip_count += 1

    def _extract_gps(self, request: ProcessVideoRequest, source: Path) -> StepResult[GPSTrack]:
        if not self.camera_has_gps(request.camera_type):
            logger.info(f"Camera type '{request.camera_type}' carries no embedded GPS, skipping extraction")
            return StepResult(value=[])
        return self._soft_step(
            "GPS extraction",
            lambda: self.gps_extractor.extract(source),
            fallback=[],
            soft_errors=(ExtractionError,)
        )

    def _store_clip(self, request: ProcessVideoRequest, clip: SegmentedClip,
                    points: List[GPSPoint]) -> str:
        key = str(ObjectKey.for_clip(self.clip_prefix, request.owner_id, clip.path.name))
        self.storage.upload_file(key, clip.path)
        self.repository.insert_clip(ClipRecord(
            video_id=request.video_id,
            clip_index=clip.index,
            clip_file_path=key,
            duration=clip.duration_seconds,
            owner_id=request.owner_id,
            gps_records=points
        ))
        return key

    @staticmethod
    def _soft_step(name: str, action: Callable[[], T], fallback: T,
                   soft_errors: Tuple[Type[PipelineError], ...]) -> StepResult[T]:
        try:
            return StepResult(value=action())
        except soft_errors as e:
            logger.warning(f"{name} failed, continuing: {e}")
            return StepResult(value=fallback, outcome=StepOutcome.SOFT_FAILED, error=f"{name}: {e}")

    @staticmethod
    def _record(result: ProcessingResult, step: StepResult) -> None:
        if not step.ok:
            result.soft_failures.append(step.error)

    def _mark_failed(self, result: ProcessingResult, message: str) -> None:
        result.status = ProcessingStatus.FAILED
        result.error = message
        try:
            self.repository.update_video_status(result.video_id, ProcessingStatus.FAILED, message)
        except PipelineError as e:
            # Row stays PROCESSING; stale-run detection picks it up
            logger.error(f"Could not record failure for video {result.video_id}: {e}")
