from dataclasses import dataclass
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class GPSPoint:
    """
    A single location sample. Immutable once produced by the extractor.

    Attributes:
        timestamp: Absolute UTC instant of the sample.
        latitude: Decimal degrees (-90 to 90).
        longitude: Decimal degrees (-180 to 180).
    """
    timestamp: datetime
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180: {self.longitude}")

    @property
    def is_placeholder(self) -> bool:
        """Receivers without a fix report exactly (0, 0)."""
        return self.latitude == 0 and self.longitude == 0

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "latitude": self.latitude,
            "longitude": self.longitude
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GPSPoint":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"])
        )


# Ordered by timestamp (non-decreasing), possibly empty.
GPSTrack = List[GPSPoint]
