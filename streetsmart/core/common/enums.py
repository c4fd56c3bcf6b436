# File: streetsmart/core/common/enums.py

from enum import Enum, unique


@unique
class ProcessingStatus(str, Enum):
    UNPROCESSED = "unprocessed"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@unique
class AnalysisStatus(str, Enum):
    """Status of the downstream pothole detector for a single clip."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@unique
class StepOutcome(str, Enum):
    OK = "ok"
    SOFT_FAILED = "soft_failed"


@unique
class ProcessingMode(str, Enum):
    SYNC = "sync"
    BACKGROUND = "background"
