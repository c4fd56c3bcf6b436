from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class ObjectKey:
    """
    Value Object for a storage key. Rejects keys that are empty or try to
    climb out of the storage root.
    """
    value: str

    def __post_init__(self):
        key = self.value.strip()
        if not key:
            raise ValueError("Storage key cannot be empty.")
        parts = PurePosixPath(key).parts
        if key.startswith("/") or ".." in parts:
            raise ValueError(f"Storage key escapes the storage root: {self.value}")

    @classmethod
    def for_clip(cls, prefix: str, owner_id: str, file_name: str) -> "ObjectKey":
        return cls(f"{prefix}/{owner_id}/{file_name}")

    def __str__(self) -> str:
        return self.value
