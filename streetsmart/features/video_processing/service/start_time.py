import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from streetsmart.features.gps_extraction.domain.models import GPSTrack
from streetsmart.features.media_probe.domain.models import MetadataTags, RECOGNIZED_TAG_KEYS

logger = logging.getLogger(__name__)

# Zone markers some muxers add, e.g. "2024-01-15 10:00:00 UTC"
LOCALE_MARKERS = ("UTC", "GMT")

FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y:%m:%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
)


def parse_tag_timestamp(value: str) -> Optional[datetime]:
    """
    Parses a container date tag into an aware UTC datetime.
    Naive values are taken as UTC. Returns None when nothing matches.
    """
    text = value.strip()
    for marker in LOCALE_MARKERS:
        if text.upper().endswith(marker):
            text = text[: -len(marker)].strip()
            break
        # MediaInfo style: "UTC 2024-01-15 10:00:00"
        if text.upper().startswith(marker + " "):
            text = text[len(marker):].strip()
            break
    if not text:
        return None

    parsed = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class StartTimeResolver:
    """
    Picks the canonical recording start: container tags first, then the
    first GPS sample, then the wall clock. GPS never overrides a tag.
    """

    def __init__(self, clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self.clock = clock

    def resolve(self, tags: MetadataTags, track: GPSTrack) -> datetime:
        for key in RECOGNIZED_TAG_KEYS:
            value = tags.get(key)
            if value is None:
                continue
            parsed = parse_tag_timestamp(value)
            if parsed is not None:
                logger.info(f"Start time from tag '{key}': {parsed.isoformat()}")
                return parsed
            logger.warning(f"Unparseable '{key}' tag: {value!r}")

        if track:
            logger.info(f"Start time from first GPS sample: {track[0].timestamp.isoformat()}")
            return track[0].timestamp

        now = self.clock()
        logger.warning(f"No usable start time in tags or GPS, using current time {now.isoformat()}")
        return now
