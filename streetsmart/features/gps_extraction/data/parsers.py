"""Parsers for embedded-metadata dumps produced by exiftool.

Two dump shapes are understood:

* Labelled blocks (``exiftool -ee``)::

    GPS Date/Time                   : 2025:03:31 23:00:35Z
    GPS Latitude                    : 41 deg 45' 32.95" N
    GPS Longitude                   : 88 deg 7' 13.21" W

* Compact triples (``exiftool -ee -b``), timestamp immediately followed by
  signed decimal latitude and longitude::

    2025:03:31 23:00:35Z41.7698047868907-88.120337175205329
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from ..domain.models import GPSPoint, GPSTrack

logger = logging.getLogger(__name__)

DMS_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*deg\s*(\d+(?:\.\d+)?)['’]\s*(\d+(?:\.\d+)?)[\"”]?\s*([NSEW])",
    re.IGNORECASE
)

BLOCK_LINE_PATTERN = re.compile(r"^(GPS Date/Time|GPS Latitude|GPS Longitude)\s*:\s*(.+)$")

INLINE_TRIPLE_PATTERN = re.compile(
    r"(\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}(?:\.\d+)?Z)\s*([+-]?\d+\.\d+)\s*([+-]\d+\.\d+)"
)

GPS_TIMESTAMP_FORMATS = ("%Y:%m:%d %H:%M:%S.%f", "%Y:%m:%d %H:%M:%S")


def dms_to_decimal(dms: str) -> Optional[float]:
    """
    Converts '41 deg 45\\' 32.95" N' to signed decimal degrees.
    Southern and western hemispheres are negative. Returns None if unparseable.
    """
    match = DMS_PATTERN.search(dms.strip())
    if not match:
        return None

    degrees = float(match.group(1))
    minutes = float(match.group(2))
    seconds = float(match.group(3))
    decimal = degrees + minutes / 60 + seconds / 3600

    if match.group(4).upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def parse_gps_timestamp(value: str) -> Optional[datetime]:
    """'2025:03:31 23:00:35Z' -> aware UTC datetime. GPS time is always UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    for fmt in GPS_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def _make_point(timestamp: Optional[datetime], latitude: Optional[float], longitude: Optional[float]) -> Optional[GPSPoint]:
    if timestamp is None or latitude is None or longitude is None:
        return None
    try:
        point = GPSPoint(timestamp=timestamp, latitude=latitude, longitude=longitude)
    except ValueError as e:
        logger.debug(f"Discarding out-of-range GPS sample: {e}")
        return None
    if point.is_placeholder:
        return None
    return point


def parse_block_records(text: str) -> List[GPSPoint]:
    """
    Line-oriented 'Key : Value' parser. A sample opens at each
    'GPS Date/Time' line and collects latitude/longitude until the next one.
    """
    points: List[GPSPoint] = []
    current: Optional[dict] = None

    def flush():
        if current is not None:
            point = _make_point(current.get("timestamp"), current.get("latitude"), current.get("longitude"))
            if point is not None:
                points.append(point)

    for line in text.splitlines():
        match = BLOCK_LINE_PATTERN.match(line.strip())
        if not match:
            continue
        key, value = match.group(1), match.group(2).strip()

        if key == "GPS Date/Time":
            flush()
            current = {"timestamp": parse_gps_timestamp(value)}
        elif current is None:
            # Coordinates before the first timestamp belong to no sample
            continue
        elif key == "GPS Latitude":
            current["latitude"] = dms_to_decimal(value)
        elif key == "GPS Longitude":
            current["longitude"] = dms_to_decimal(value)

    flush()
    return points


def parse_inline_records(text: str) -> List[GPSPoint]:
    """Scans compact '<timestamp><lat><lon>' triples anywhere in the dump."""
    points: List[GPSPoint] = []
    for match in INLINE_TRIPLE_PATTERN.finditer(text):
        point = _make_point(
            parse_gps_timestamp(match.group(1)),
            float(match.group(2)),
            float(match.group(3))
        )
        if point is not None:
            points.append(point)
    return points


def parse_gps_dump(text: str) -> GPSTrack:
    """
    Applies the block parser, then the inline parser; first non-empty wins.
    The result is sorted ascending by timestamp (stable for equal instants).
    """
    points = parse_block_records(text)
    if not points:
        points = parse_inline_records(text)
    return sorted(points, key=lambda p: p.timestamp)
