from abc import ABC, abstractmethod
from pathlib import Path
from .models import ProbeResult


class IMediaProber(ABC):
    """
    Contract for read-only media inspection.
    Abstracts away the underlying tool (ffprobe) from the pipeline.
    """

    @abstractmethod
    def probe(self, path: Path) -> ProbeResult:
        """
        Inspects container and streams of a local file.

        Raises:
            ProbeError: If the tool fails, times out, or its output is not usable.
        """
        pass

    @abstractmethod
    def probe_duration(self, path: Path) -> float:
        """
        Stream-only query for the duration of a file, in seconds.

        Raises:
            ProbeError: If the duration cannot be measured.
        """
        pass
