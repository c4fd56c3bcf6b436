from pathlib import Path
from ..domain.models import ProbeResult
from ..data.ffprobe_adapter import FFprobeAdapter


def probe_media(video_path: str) -> ProbeResult:
    """
    Standalone API: Probes a local media file.
    Does NOT interact with the database.
    """
    return FFprobeAdapter().probe(Path(video_path))
