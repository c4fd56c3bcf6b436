import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional
from uuid import UUID

from streetsmart.core.config.settings import settings

logger = logging.getLogger(__name__)


class RunWorkspace:
    """
    Scratch directory for exactly one pipeline run. Each entry gets a fresh
    `run_<video_id>_<random>` directory, so overlapping runs for the same
    video never share files. Removed on every exit path.

        with RunWorkspace(video_id) as ws:
            ws.source_file(".mp4")
            ws.clips_dir
    """

    def __init__(self, video_id: UUID, root: Optional[Path] = None):
        self.video_id = video_id
        self.root = Path(root) if root is not None else settings.SCRATCH_DIR
        self.path: Optional[Path] = None

    @property
    def clips_dir(self) -> Path:
        return self._require_path() / "clips"

    def source_file(self, suffix: str = ".mp4") -> Path:
        return self._require_path() / f"source{suffix or '.mp4'}"

    def _require_path(self) -> Path:
        if self.path is None:
            raise RuntimeError("RunWorkspace used outside of its 'with' block")
        return self.path

    def __enter__(self) -> "RunWorkspace":
        self.root.mkdir(parents=True, exist_ok=True)
        self.path = Path(tempfile.mkdtemp(prefix=f"run_{self.video_id}_", dir=self.root))
        self.clips_dir.mkdir()
        logger.debug(f"Scratch directory for video {self.video_id}: {self.path}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        if self.path is None:
            return
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove scratch directory {self.path}: {e}")
