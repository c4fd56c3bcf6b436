import logging
import subprocess
from pathlib import Path
from typing import Optional

from streetsmart.core.config.settings import settings
from streetsmart.core.common.errors import ExtractionError
from ..domain.interfaces import IGPSTrackExtractor
from ..domain.models import GPSTrack
from .parsers import parse_gps_dump

logger = logging.getLogger(__name__)


class ExifToolGPSAdapter(IGPSTrackExtractor):
    """
    Concrete implementation of IGPSTrackExtractor using exiftool.
    Asks for the labelled embedded dump first and the compact binary dump
    only when the first one carries no samples.
    """

    def __init__(self, binary: Optional[str] = None, timeout: Optional[float] = None):
        self.binary = binary or settings.EXIFTOOL_BINARY
        self.timeout = timeout if timeout is not None else settings.GPS_TIMEOUT_SECONDS

    def extract(self, path: Path) -> GPSTrack:
        # -ee: extract embedded (timed) metadata from the video stream
        track = parse_gps_dump(self._run([self.binary, "-ee", str(path)]))
        if track:
            logger.info(f"Extracted {len(track)} GPS samples from labelled dump of {path.name}")
            return track

        # -b: raw values, Garmin cameras emit compact timestamp/lat/lon triples
        track = parse_gps_dump(self._run([self.binary, "-ee", "-b", str(path)]))
        if track:
            logger.info(f"Extracted {len(track)} GPS samples from binary dump of {path.name}")
        else:
            logger.warning(f"No GPS samples found in {path.name}")
        return track

    def _run(self, cmd: list) -> str:
        logger.info(f"Executing exiftool: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                timeout=self.timeout
            )
        except subprocess.CalledProcessError as e:
            error_message = e.stderr.decode(errors="replace").strip() if e.stderr else "Unknown exiftool error"
            logger.error(f"exiftool failed. STDERR: {error_message}")
            raise ExtractionError(f"GPS extraction failed: {error_message}") from e
        except subprocess.TimeoutExpired as e:
            raise ExtractionError(f"GPS extraction timed out after {self.timeout}s") from e
        except OSError as e:
            raise ExtractionError(f"GPS extraction could not be started: {e}") from e

        # Binary dumps are not guaranteed to be valid UTF-8
        return result.stdout.decode("utf-8", errors="replace")
