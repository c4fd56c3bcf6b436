from datetime import datetime
from typing import Dict, List, Sequence

from streetsmart.core.shared_types import TimeWindow
from streetsmart.features.gps_extraction.domain.models import GPSPoint, GPSTrack
from streetsmart.features.video_segmentation.domain.models import SegmentedClip


class ClipGPSAssociator:
    """
    Partitions a GPS track into the half-open time windows of each clip:
    clip i owns [start + i*L, start + (i+1)*L). A sample on a boundary
    belongs to the window it opens. No interpolation across windows.
    """

    def __init__(self, segment_length: float):
        if segment_length <= 0:
            raise ValueError(f"Segment length must be positive: {segment_length}")
        self.segment_length = segment_length

    def window_for(self, start: datetime, index: int) -> TimeWindow:
        return TimeWindow.for_segment(start, index, self.segment_length)

    def points_for(self, start: datetime, index: int, track: GPSTrack) -> List[GPSPoint]:
        window = self.window_for(start, index)
        return [point for point in track if window.contains(point.timestamp)]

    def associate(self, start: datetime, clips: Sequence[SegmentedClip],
                  track: GPSTrack) -> Dict[int, List[GPSPoint]]:
        """Maps each clip index to its GPS subset, preserving track order."""
        return {clip.index: self.points_for(start, clip.index, track) for clip in clips}
