from pathlib import Path
from typing import Dict, List

import pytest

from streetsmart.core.common.errors import ProbeError, SegmentationError
from streetsmart.features.video_segmentation.domain.models import SegmentRequest
from streetsmart.features.video_segmentation.service.segmenter import Segmenter, is_accepted_duration


class FakeSplitter:
    """Writes empty files named like the segment muxer would."""

    def __init__(self, count: int):
        self.count = count
        self.requests: List[SegmentRequest] = []

    def split(self, request: SegmentRequest) -> List[Path]:
        self.requests.append(request)
        request.output_dir.mkdir(parents=True, exist_ok=True)
        paths = []
        for i in range(self.count):
            path = Path(str(request.output_pattern) % i)
            path.write_bytes(b"")
            paths.append(path)
        # Out of order on purpose
        return list(reversed(paths))


class FakeProber:
    def __init__(self, durations: Dict[int, object]):
        self.durations = durations

    def probe(self, path):
        raise NotImplementedError

    def probe_duration(self, path: Path) -> float:
        index = int(path.stem.rsplit("_", 1)[1])
        value = self.durations[index]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def source(tmp_path):
    video = tmp_path / "source.mp4"
    video.write_bytes(b"video")
    return video


# --- Duration acceptance ---

@pytest.mark.parametrize("measured", [10.0, 10.09, 9.91, 9.90, 10.10])
def test_durations_close_to_target_are_accepted(measured):
    assert is_accepted_duration(measured, 10)


@pytest.mark.parametrize("measured", [9.89, 10.2, 5.0, 0.0])
def test_durations_far_from_target_are_rejected(measured):
    assert not is_accepted_duration(measured, 10)


# --- Segmenter ---

def test_thirty_five_second_video_yields_three_clips(tmp_path, source):
    splitter = FakeSplitter(count=4)
    prober = FakeProber({0: 10.01, 1: 10.0, 2: 9.98, 3: 5.03})

    clips = Segmenter(splitter, prober).segment(source, tmp_path / "clips", "42")

    assert [c.index for c in clips] == [0, 1, 2]
    assert [c.path.name for c in clips] == ["42_clip_00000.mp4", "42_clip_00001.mp4", "42_clip_00002.mp4"]
    assert splitter.requests[0].segment_length == 10


def test_rejected_middle_segment_leaves_an_index_gap(tmp_path, source):
    prober = FakeProber({0: 10.0, 1: 7.5, 2: 10.0})

    clips = Segmenter(FakeSplitter(count=3), prober).segment(source, tmp_path / "clips", "7")

    assert [c.index for c in clips] == [0, 2]


def test_unmeasurable_segment_is_rejected(tmp_path, source):
    prober = FakeProber({0: 10.0, 1: ProbeError("corrupt"), 2: 10.0})

    clips = Segmenter(FakeSplitter(count=3), prober).segment(source, tmp_path / "clips", "7")

    assert [c.index for c in clips] == [0, 2]


def test_short_video_yields_no_clips(tmp_path, source):
    clips = Segmenter(FakeSplitter(count=1), FakeProber({0: 4.2})).segment(source, tmp_path / "clips", "7")
    assert clips == []


def test_no_output_is_a_segmentation_error(tmp_path, source):
    with pytest.raises(SegmentationError):
        Segmenter(FakeSplitter(count=0), FakeProber({})).segment(source, tmp_path / "clips", "7")


def test_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        Segmenter(FakeSplitter(count=1), FakeProber({0: 10.0})).segment(
            tmp_path / "missing.mp4", tmp_path / "clips", "7"
        )


def test_custom_segment_length(tmp_path, source):
    prober = FakeProber({0: 5.0, 1: 5.02, 2: 10.0})

    clips = Segmenter(FakeSplitter(count=3), prober, segment_length=5).segment(source, tmp_path / "clips", "7")

    assert [c.index for c in clips] == [0, 1]
