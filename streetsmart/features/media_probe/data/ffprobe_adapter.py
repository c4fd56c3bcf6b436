import json
import logging
import subprocess
from pathlib import Path
from typing import Optional

from streetsmart.core.config.settings import settings
from streetsmart.core.common.errors import ProbeError
from ..domain.interfaces import IMediaProber
from ..domain.models import MetadataTags, ProbeResult

logger = logging.getLogger(__name__)


class FFprobeAdapter(IMediaProber):
    """
    Concrete implementation of IMediaProber using ffprobe.
    """

    def __init__(self, binary: Optional[str] = None, timeout: Optional[float] = None):
        self.binary = binary or settings.FFPROBE_BINARY
        self.timeout = timeout if timeout is not None else settings.PROBE_TIMEOUT_SECONDS

    def probe(self, path: Path) -> ProbeResult:
        # -print_format json: machine readable output
        # -show_format / -show_streams: container and per-stream metadata
        cmd = [
            self.binary,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path)
        ]
        stdout = self._run(cmd)

        try:
            raw = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Probe output is not valid JSON for {path.name}: {e}") from e
        if not isinstance(raw, dict):
            raise ProbeError(f"Probe output for {path.name} is not a JSON object")

        fmt = raw.get("format") or {}
        duration = self._parse_duration(fmt.get("duration"))
        if duration is None:
            raise ProbeError(f"Probe reported no duration for {path.name}")

        return ProbeResult(
            duration_seconds=duration,
            tags=MetadataTags.from_format_tags(fmt.get("tags")),
            raw=raw
        )

    def probe_duration(self, path: Path) -> float:
        cmd = [
            self.binary,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(path)
        ]
        duration = self._parse_duration(self._run(cmd).strip())
        if duration is None:
            raise ProbeError(f"Could not measure duration of {path.name}")
        return duration

    def _run(self, cmd: list) -> str:
        logger.info(f"Executing ffprobe: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr.strip() if e.stderr else "Unknown ffprobe error"
            logger.error(f"ffprobe failed. STDERR: {error_message}")
            raise ProbeError(f"Media probe failed: {error_message}") from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"ffprobe timed out after {self.timeout}s")
            raise ProbeError(f"Media probe timed out after {self.timeout}s") from e
        except OSError as e:
            raise ProbeError(f"Media probe could not be started: {e}") from e
        return result.stdout

    @staticmethod
    def _parse_duration(value) -> Optional[float]:
        if value in (None, "", "N/A"):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
