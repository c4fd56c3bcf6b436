from abc import ABC, abstractmethod
from pathlib import Path
from .models import GPSTrack


class IGPSTrackExtractor(ABC):
    """
    Contract for pulling the embedded GPS track out of a video file.
    """

    @abstractmethod
    def extract(self, path: Path) -> GPSTrack:
        """
        Returns the GPS track sorted ascending by timestamp (possibly empty).

        Raises:
            ExtractionError: If the underlying tool cannot be run or fails.
        """
        pass
