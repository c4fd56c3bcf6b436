from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path


@dataclass(frozen=True)
class TimeWindow:
    """
    Value Object representing a half-open span of absolute time: [start, end).
    Enforces that start is strictly before end.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Window start ({self.start}) must be before end ({self.end}).")

    @classmethod
    def for_segment(cls, origin: datetime, index: int, length_seconds: float) -> "TimeWindow":
        start = origin + timedelta(seconds=index * length_seconds)
        return cls(start, start + timedelta(seconds=length_seconds))

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    @property
    def duration(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(frozen=True)
class MediaFile:
    """
    Entity representing a media file on the local filesystem.
    Encapsulates path validation and directory creation.
    """
    path: Path
    validate_exists: bool = True

    def __post_init__(self):
        if str(self.path).strip() in ("", "."):
            raise ValueError("File path cannot be empty.")
        if self.validate_exists:
            if not self.path.exists():
                raise FileNotFoundError(f"Media file not found: {self.path}")
            if not self.path.is_file():
                raise ValueError(f"Path is not a file: {self.path}")

    def exists(self) -> bool:
        return self.path.exists()

    def ensure_parent_dir(self) -> None:
        """Creates the directory structure for this file if it doesn't exist."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
