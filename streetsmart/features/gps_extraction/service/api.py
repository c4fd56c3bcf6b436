from pathlib import Path
from ..domain.models import GPSTrack
from ..data.exiftool_adapter import ExifToolGPSAdapter


def extract_gps_track(video_path: str) -> GPSTrack:
    """
    Standalone API: Extracts the embedded GPS track from a video file.
    Does NOT interact with the database.
    """
    return ExifToolGPSAdapter().extract(Path(video_path))
