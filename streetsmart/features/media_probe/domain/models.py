from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

# Container tags the pipeline understands, in lookup priority order.
RECOGNIZED_TAG_KEYS = ("encoded_date", "creation_time", "date")


@dataclass(frozen=True)
class MetadataTags:
    """
    The closed set of container tags used for control flow.
    Anything else the probe reports stays in ProbeResult.raw for audit only.
    """
    encoded_date: Optional[str] = None
    creation_time: Optional[str] = None
    date: Optional[str] = None

    @classmethod
    def from_format_tags(cls, tags: Optional[Mapping[str, Any]]) -> "MetadataTags":
        # Muxers disagree on case ("creation_time" vs "CREATION_TIME")
        normalized = {str(k).lower(): v for k, v in (tags or {}).items()}
        values = {}
        for key in RECOGNIZED_TAG_KEYS:
            value = normalized.get(key)
            if value is not None and str(value).strip():
                values[key] = str(value).strip()
        return cls(**values)

    def get(self, key: str) -> Optional[str]:
        if key not in RECOGNIZED_TAG_KEYS:
            raise KeyError(f"Unrecognized tag key: {key}")
        return getattr(self, key)


@dataclass(frozen=True)
class ProbeResult:
    """Structured output of a full container/stream probe."""
    duration_seconds: float
    tags: MetadataTags = field(default_factory=MetadataTags)
    raw: Dict[str, Any] = field(default_factory=dict)
