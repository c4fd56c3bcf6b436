from dataclasses import dataclass
from pathlib import Path
from streetsmart.core.shared_types import MediaFile

# Zero-padded so that lexical order equals temporal order.
SEGMENT_NAME_PATTERN = "{stem}_clip_%05d.mp4"
SEGMENT_GLOB = "*_clip_*.mp4"


@dataclass(frozen=True)
class SegmentRequest:
    source_video: MediaFile
    output_dir: Path
    segment_length: float
    file_stem: str

    def __post_init__(self):
        if self.segment_length <= 0:
            raise ValueError(f"Segment length must be positive: {self.segment_length}")
        if not self.file_stem or "/" in self.file_stem:
            raise ValueError(f"Invalid segment file stem: {self.file_stem!r}")

    @property
    def output_pattern(self) -> Path:
        return self.output_dir / SEGMENT_NAME_PATTERN.format(stem=self.file_stem)


@dataclass(frozen=True)
class SegmentedClip:
    """
    An accepted segment on local disk.
    `index` is the segment's position in the source, so clip i covers
    [i * length, (i + 1) * length) of the recording.
    """
    index: int
    path: Path
    duration_seconds: float
