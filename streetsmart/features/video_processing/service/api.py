import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import timedelta
from typing import List, Optional, Union
from uuid import UUID

from streetsmart.core.common.enums import ProcessingMode
from streetsmart.core.common.errors import ValidationError
from streetsmart.core.config.settings import settings
from streetsmart.features.gps_extraction.data.exiftool_adapter import ExifToolGPSAdapter
from streetsmart.features.media_probe.data.ffprobe_adapter import FFprobeAdapter
from streetsmart.features.storage.service.api import storage
from streetsmart.features.video_segmentation.data.ffmpeg_adapter import FFmpegSegmentAdapter
from streetsmart.features.video_segmentation.service.segmenter import Segmenter

from ..data.repository import SqlVideoRepository
from ..domain.models import ProcessingResult, ProcessVideoRequest
from .pipeline import ProcessingPipeline

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def build_pipeline() -> ProcessingPipeline:
    """Wires the production adapters (ffprobe, exiftool, ffmpeg, SQL, local storage)."""
    prober = FFprobeAdapter()
    return ProcessingPipeline(
        repository=SqlVideoRepository(),
        storage=storage,
        prober=prober,
        gps_extractor=ExifToolGPSAdapter(),
        segmenter=Segmenter(
            splitter=FFmpegSegmentAdapter(),
            prober=prober,
            segment_length=settings.SEGMENT_LENGTH_SECONDS,
            tolerance=settings.SEGMENT_DURATION_TOLERANCE
        )
    )


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.MAX_CONCURRENT_RUNS,
                thread_name_prefix="video-pipeline"
            )
        return _executor


def register_upload(file_name: str, file_path: str, owner_id: str,
                    camera_type: str, file_size: int) -> UUID:
    """Records a finished upload as an UNPROCESSED video and returns its id."""
    return SqlVideoRepository().register_upload(file_name, file_path, owner_id, camera_type, file_size)


def run_video_processing(request: ProcessVideoRequest,
                         pipeline: Optional[ProcessingPipeline] = None) -> ProcessingResult:
    """
    Public Service API: process one video synchronously.

    Raises:
        ValidationError: If the request is incomplete or the video is unknown.
    """
    return (pipeline or build_pipeline()).run(request)


def dispatch_video_processing(request: ProcessVideoRequest,
                              mode: Union[ProcessingMode, str, None] = None,
                              pipeline: Optional[ProcessingPipeline] = None) -> "Future[ProcessingResult]":
    """
    Public Service API: process one video inline or on the background pool.

    Both modes return a Future. In SYNC mode it is already resolved when this
    function returns; in BACKGROUND mode the caller may ignore it
    (fire-and-forget): the outcome is recorded on the video row, and errors
    raised before the row could be touched are logged by `_log_background_failure`.

    Raises:
        ValidationError: If required request fields are missing (both modes).
    """
    mode = ProcessingMode(mode or settings.PROCESSING_MODE)

    missing = request.missing_fields()
    if missing:
        raise ValidationError(f"Missing required parameters: {', '.join(missing)}")

    if mode == ProcessingMode.SYNC:
        future: Future = Future()
        try:
            future.set_result(run_video_processing(request, pipeline))
        except Exception as e:
            future.set_exception(e)
        return future

    logger.info(f"Queueing video {request.video_id} for background processing")
    future = _get_executor().submit(run_video_processing, request, pipeline)
    future.add_done_callback(lambda f: _log_background_failure(request, f))
    return future


def _log_background_failure(request: ProcessVideoRequest, future: Future) -> None:
    if future.cancelled():
        logger.warning(f"Background run for video {request.video_id} was cancelled")
        return
    error = future.exception()
    if error is not None:
        logger.error(
            f"Background run for video {request.video_id} raised {error.__class__.__name__}: {error}",
            exc_info=error
        )


def find_stale_videos(max_age: timedelta) -> List[UUID]:
    """Videos stuck in PROCESSING for longer than `max_age`, candidates for re-invocation."""
    return SqlVideoRepository().find_stale_processing(max_age)


def shutdown(wait: bool = True) -> None:
    """Stops the background pool, optionally waiting for queued runs."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=wait)
            _executor = None
