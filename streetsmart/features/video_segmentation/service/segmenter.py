import logging
from pathlib import Path
from typing import List

from streetsmart.core.common.errors import ProbeError, SegmentationError
from streetsmart.core.shared_types import MediaFile
from streetsmart.features.media_probe.domain.interfaces import IMediaProber

from ..domain.interfaces import IStreamSplitter
from ..domain.models import SegmentRequest, SegmentedClip

logger = logging.getLogger(__name__)


def is_accepted_duration(measured: float, target: float, tolerance: float = 0.1) -> bool:
    """A segment is kept iff it is strictly within `tolerance` seconds of the target."""
    return abs(measured - target) < tolerance


class Segmenter:
    """
    Splits a source video and keeps only the segments whose measured
    duration matches the target length. The short trailing remainder is
    the usual casualty and is dropped without error.
    """

    def __init__(self, splitter: IStreamSplitter, prober: IMediaProber,
                 segment_length: float = 10, tolerance: float = 0.1):
        self.splitter = splitter
        self.prober = prober
        self.segment_length = segment_length
        self.tolerance = tolerance

    def segment(self, source_path: Path, output_dir: Path, file_stem: str) -> List[SegmentedClip]:
        request = SegmentRequest(
            source_video=MediaFile(source_path, validate_exists=True),
            output_dir=output_dir,
            segment_length=self.segment_length,
            file_stem=file_stem
        )

        produced = self.splitter.split(request)
        if not produced:
            raise SegmentationError(f"Segmentation of {source_path.name} produced no files")

        accepted: List[SegmentedClip] = []
        for index, path in enumerate(sorted(produced, key=lambda p: p.name)):
            try:
                duration = self.prober.probe_duration(path)
            except ProbeError as e:
                logger.warning(f"Rejecting segment {path.name}: {e}")
                continue

            if not is_accepted_duration(duration, self.segment_length, self.tolerance):
                logger.info(f"Rejecting segment {path.name}: {duration:.3f}s (target {self.segment_length}s)")
                continue

            accepted.append(SegmentedClip(index=index, path=path, duration_seconds=duration))

        logger.info(f"Segmented {source_path.name}: {len(accepted)}/{len(produced)} segments accepted")
        return accepted
