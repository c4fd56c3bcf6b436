from datetime import datetime, timezone

import pytest

from streetsmart.features.gps_extraction.data.parsers import (
    dms_to_decimal,
    parse_block_records,
    parse_gps_dump,
    parse_gps_timestamp,
    parse_inline_records,
)
from streetsmart.features.gps_extraction.domain.models import GPSPoint


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


BLOCK_DUMP = """\
---- Doc1 ----
Sample Time                     : 0 s
GPS Date/Time                   : 2025:03:31 23:00:36Z
GPS Latitude                    : 41 deg 45' 33.10" N
GPS Longitude                   : 88 deg 7' 13.00" W
GPS Speed                       : 31
---- Doc2 ----
GPS Date/Time                   : 2025:03:31 23:00:35Z
GPS Latitude                    : 41 deg 45' 32.95" N
GPS Latitude Ref                : North
GPS Longitude                   : 88 deg 7' 13.21" W
"""


# --- DMS conversion ---

def test_dms_to_decimal_north():
    assert dms_to_decimal("41 deg 45' 32.95\" N") == pytest.approx(41.759153, abs=1e-6)


@pytest.mark.parametrize("hemisphere", ["S", "W"])
def test_dms_to_decimal_negates_south_and_west(hemisphere):
    assert dms_to_decimal(f"41 deg 45' 32.95\" {hemisphere}") == pytest.approx(-41.759153, abs=1e-6)


def test_dms_to_decimal_east_is_positive():
    assert dms_to_decimal("2 deg 17' 40.20\" E") == pytest.approx(2.294500, abs=1e-6)


def test_dms_to_decimal_rejects_garbage():
    assert dms_to_decimal("North") is None
    assert dms_to_decimal("") is None


# --- Timestamps ---

def test_parse_gps_timestamp_is_utc():
    assert parse_gps_timestamp("2025:03:31 23:00:35Z") == utc(2025, 3, 31, 23, 0, 35)


def test_parse_gps_timestamp_with_fraction():
    assert parse_gps_timestamp("2025:03:31 23:00:35.500Z") == utc(2025, 3, 31, 23, 0, 35, 500000)


def test_parse_gps_timestamp_invalid():
    assert parse_gps_timestamp("yesterday") is None


# --- Block parser ---

def test_block_parser_collects_each_sample():
    points = parse_block_records(BLOCK_DUMP)

    assert len(points) == 2
    # Input order is kept by the block parser itself
    assert points[0].timestamp == utc(2025, 3, 31, 23, 0, 36)
    assert points[1].latitude == pytest.approx(41.759153, abs=1e-6)
    assert points[1].longitude < 0


def test_block_parser_ignores_coordinates_before_first_timestamp():
    dump = (
        "GPS Latitude : 10 deg 0' 0.00\" N\n"
        "GPS Longitude : 10 deg 0' 0.00\" E\n"
        "GPS Date/Time : 2025:01:01 00:00:00Z\n"
        "GPS Latitude : 11 deg 0' 0.00\" N\n"
        "GPS Longitude : 12 deg 0' 0.00\" E\n"
    )
    points = parse_block_records(dump)
    assert len(points) == 1
    assert points[0].latitude == pytest.approx(11.0)


def test_block_parser_drops_incomplete_samples():
    dump = (
        "GPS Date/Time : 2025:01:01 00:00:00Z\n"
        "GPS Latitude : 11 deg 0' 0.00\" N\n"
        "GPS Date/Time : 2025:01:01 00:00:01Z\n"
        "GPS Latitude : 11 deg 0' 1.00\" N\n"
        "GPS Longitude : 12 deg 0' 0.00\" E\n"
    )
    points = parse_block_records(dump)
    assert [p.timestamp for p in points] == [utc(2025, 1, 1, 0, 0, 1)]


# --- Inline parser ---

def test_inline_parser_reads_compact_triples():
    dump = "junk2025:03:31 23:00:35Z41.7698047868907-88.120337175205329more2025:03:31 23:00:36Z41.77-88.13"
    points = parse_inline_records(dump)

    assert len(points) == 2
    assert points[0] == GPSPoint(utc(2025, 3, 31, 23, 0, 35), 41.7698047868907, -88.120337175205329)
    assert points[1].longitude == pytest.approx(-88.13)


def test_inline_parser_handles_negative_latitude():
    points = parse_inline_records("2025:03:31 23:00:35Z-33.8688+151.2093")
    assert points[0].latitude == pytest.approx(-33.8688)
    assert points[0].longitude == pytest.approx(151.2093)


# --- Combined ---

def test_dump_prefers_block_records():
    dump = BLOCK_DUMP + "\n2025:03:31 23:00:40Z41.0-88.0\n"
    track = parse_gps_dump(dump)
    assert len(track) == 2


def test_dump_falls_back_to_inline_records():
    track = parse_gps_dump("2025:03:31 23:00:40Z41.0-88.0")
    assert len(track) == 1


def test_dump_is_sorted_by_timestamp():
    track = parse_gps_dump(BLOCK_DUMP)
    assert [p.timestamp for p in track] == sorted(p.timestamp for p in track)
    assert track[0].timestamp == utc(2025, 3, 31, 23, 0, 35)


def test_dump_with_n_triples_yields_n_points_including_duplicates():
    triples = [
        "2025:03:31 23:00:37Z41.3-88.3",
        "2025:03:31 23:00:35Z41.1-88.1",
        "2025:03:31 23:00:36Z41.2-88.2",
        "2025:03:31 23:00:36Z41.2-88.2",
    ]
    track = parse_gps_dump("\n".join(triples))

    assert len(track) == len(triples)
    assert all(a.timestamp <= b.timestamp for a, b in zip(track, track[1:]))
    assert sum(1 for p in track if p.latitude == pytest.approx(41.2)) == 2


def test_dump_discards_placeholder_and_out_of_range_samples():
    dump = "\n".join([
        "2025:03:31 23:00:35Z0.0+0.0",
        "2025:03:31 23:00:36Z95.0-88.0",
        "2025:03:31 23:00:37Z41.0-188.0",
        "2025:03:31 23:00:38Z0.0-88.0",
    ])
    track = parse_gps_dump(dump)

    # Only the exact (0, 0) pair is a placeholder; latitude 0 alone is valid
    assert len(track) == 1
    assert track[0].latitude == 0.0
    assert track[0].longitude == -88.0


def test_empty_dump():
    assert parse_gps_dump("") == []
