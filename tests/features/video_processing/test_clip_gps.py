from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from streetsmart.features.gps_extraction.domain.models import GPSPoint
from streetsmart.features.video_processing.service.clip_gps import ClipGPSAssociator
from streetsmart.features.video_segmentation.domain.models import SegmentedClip

START = datetime(2025, 3, 31, 23, 0, 35, tzinfo=timezone.utc)


def point(offset_seconds: float, lat: float = 41.0) -> GPSPoint:
    return GPSPoint(START + timedelta(seconds=offset_seconds), lat, -88.0)


def clip(index: int) -> SegmentedClip:
    return SegmentedClip(index=index, path=Path(f"x_clip_{index:05d}.mp4"), duration_seconds=10.0)


def test_points_are_partitioned_by_window():
    track = [point(s) for s in (0, 5, 9.999, 10, 15, 20, 29, 31)]
    subsets = ClipGPSAssociator(10).associate(START, [clip(0), clip(1), clip(2)], track)

    assert [p.timestamp for p in subsets[0]] == [point(s).timestamp for s in (0, 5, 9.999)]
    assert [p.timestamp for p in subsets[1]] == [point(s).timestamp for s in (10, 15)]
    assert [p.timestamp for p in subsets[2]] == [point(s).timestamp for s in (20, 29)]


def test_boundary_point_belongs_to_later_clip():
    subsets = ClipGPSAssociator(10).associate(START, [clip(0), clip(1)], [point(10)])
    assert subsets[0] == []
    assert len(subsets[1]) == 1


def test_no_point_in_two_clips():
    track = [point(s / 2) for s in range(0, 60)]
    subsets = ClipGPSAssociator(10).associate(START, [clip(0), clip(1), clip(2)], track)

    seen = [p for points in subsets.values() for p in points]
    assert len(seen) == len(track)
    assert len({p.timestamp for p in seen}) == len(seen)


def test_index_gap_keeps_absolute_windows():
    track = [point(5), point(15), point(25)]
    subsets = ClipGPSAssociator(10).associate(START, [clip(0), clip(2)], track)

    assert set(subsets) == {0, 2}
    assert subsets[2] == [point(25)]


def test_points_before_start_are_dropped():
    subsets = ClipGPSAssociator(10).associate(START, [clip(0)], [point(-1), point(1)])
    assert subsets[0] == [point(1)]


def test_empty_track_gives_empty_subsets():
    subsets = ClipGPSAssociator(10).associate(START, [clip(0), clip(1)], [])
    assert subsets == {0: [], 1: []}


def test_track_order_is_preserved():
    track = [point(1, lat=1.0), point(1, lat=2.0), point(2, lat=3.0)]
    subsets = ClipGPSAssociator(10).associate(START, [clip(0)], track)
    assert [p.latitude for p in subsets[0]] == [1.0, 2.0, 3.0]


def test_rejects_non_positive_length():
    with pytest.raises(ValueError):
        ClipGPSAssociator(0)
