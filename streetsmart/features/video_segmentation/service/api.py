from pathlib import Path
from typing import List

from streetsmart.core.config.settings import settings
from streetsmart.features.media_probe.data.ffprobe_adapter import FFprobeAdapter
from ..domain.models import SegmentedClip
from ..data.ffmpeg_adapter import FFmpegSegmentAdapter
from .segmenter import Segmenter


def segment_video(source_path: str, output_dir: str) -> List[SegmentedClip]:
    """
    Public Service API: Split a video into fixed-length clips.

    Args:
        source_path: Absolute path to the source video.
        output_dir: Directory where the clips should be written.

    Returns:
        The accepted clips, in temporal order.
    """
    source = Path(source_path)
    segmenter = Segmenter(
        splitter=FFmpegSegmentAdapter(),
        prober=FFprobeAdapter(),
        segment_length=settings.SEGMENT_LENGTH_SECONDS,
        tolerance=settings.SEGMENT_DURATION_TOLERANCE
    )
    return segmenter.segment(source, Path(output_dir), source.stem)
