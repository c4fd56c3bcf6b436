import subprocess
import logging
from pathlib import Path
from typing import List, Optional

from streetsmart.core.config.settings import settings
from streetsmart.core.common.errors import SegmentationError
from ..domain.interfaces import IStreamSplitter
from ..domain.models import SegmentRequest, SEGMENT_GLOB

logger = logging.getLogger(__name__)


class FFmpegSegmentAdapter(IStreamSplitter):
    """
    Concrete implementation of IStreamSplitter using FFmpeg's segment muxer.
    Copies streams, so cuts land on keyframes and segments may drift slightly
    from the requested length.
    """

    def __init__(self, binary: Optional[str] = None, timeout: Optional[float] = None):
        self.binary = binary or settings.FFMPEG_BINARY
        self.timeout = timeout if timeout is not None else settings.SEGMENT_TIMEOUT_SECONDS

    def split(self, request: SegmentRequest) -> List[Path]:
        request.output_dir.mkdir(parents=True, exist_ok=True)

        # -c copy: no re-encode
        # -map_metadata 0: carry the source's container metadata into each segment
        # -f segment -segment_time N: fixed-length segments
        # -reset_timestamps 1: every segment starts at t=0
        cmd = [
            self.binary,
            "-y",
            "-i", str(request.source_video.path),
            "-c", "copy",
            "-map_metadata", "0",
            "-f", "segment",
            "-segment_time", str(request.segment_length),
            "-reset_timestamps", "1",
            str(request.output_pattern)
        ]

        logger.info(f"Executing FFmpeg Segment: {' '.join(cmd)}")

        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr if e.stderr else "Unknown FFmpeg error"
            logger.error(f"FFmpeg Segmenting Failed. STDERR: {error_message}")
            raise SegmentationError(f"Video segmentation failed: {error_message}") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"FFmpeg Segmenting timed out after {self.timeout}s")
            raise SegmentationError(f"Video segmentation timed out after {self.timeout}s") from e
        except OSError as e:
            raise SegmentationError(f"Video segmentation could not be started: {e}") from e

        return sorted(request.output_dir.glob(SEGMENT_GLOB), key=lambda p: p.name)
