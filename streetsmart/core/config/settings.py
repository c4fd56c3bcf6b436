# File: streetsmart/core/config/settings.py

import os
import shutil
from pathlib import Path


def _csv_env(name: str) -> frozenset:
    raw = os.getenv(name, "")
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


class Settings:
    # --- Paths ---
    # streetsmart/core/config/settings.py -> config -> core -> streetsmart -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = Path(os.getenv("STREETSMART_DATA_DIR", str(BASE_DIR / "data")))
    STORAGE_DIR: Path = DATA_DIR / "storage"
    SCRATCH_DIR: Path = DATA_DIR / "scratch"

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "streetsmart_db")

    @property
    def DATABASE_URL(self) -> str:
        # SQLite only when explicitly requested (test-suite, local runs).
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return os.getenv("SQLITE_URL", "sqlite:///./test_streetsmart.db")

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- External Tools ---
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")
    EXIFTOOL_BINARY: str = os.getenv("EXIFTOOL_BINARY_PATH", shutil.which("exiftool") or "exiftool")

    PROBE_TIMEOUT_SECONDS: float = float(os.getenv("PROBE_TIMEOUT_SECONDS", "60"))
    GPS_TIMEOUT_SECONDS: float = float(os.getenv("GPS_TIMEOUT_SECONDS", "120"))
    SEGMENT_TIMEOUT_SECONDS: float = float(os.getenv("SEGMENT_TIMEOUT_SECONDS", "600"))

    # --- Segmentation ---
    SEGMENT_LENGTH_SECONDS: int = 10
    SEGMENT_DURATION_TOLERANCE: float = 0.1
    CLIP_STORAGE_PREFIX: str = os.getenv("CLIP_STORAGE_PREFIX", "processed-clips")

    # --- GPS ---
    # Empty means every camera type carries embedded GPS.
    GPS_CAMERA_TYPES: frozenset = _csv_env("GPS_CAMERA_TYPES")

    # --- Invocation ---
    PROCESSING_MODE: str = os.getenv("PROCESSING_MODE", "sync")
    MAX_CONCURRENT_RUNS: int = int(os.getenv("MAX_CONCURRENT_RUNS", "2"))

    def camera_has_gps(self, camera_type: str) -> bool:
        return not self.GPS_CAMERA_TYPES or camera_type in self.GPS_CAMERA_TYPES

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.STORAGE_DIR.mkdir(parents=True, exist_ok=True)
        self.SCRATCH_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
