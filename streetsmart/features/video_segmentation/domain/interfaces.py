from abc import ABC, abstractmethod
from pathlib import Path
from typing import List
from .models import SegmentRequest


class IStreamSplitter(ABC):
    """
    Contract for the stream-copy splitting engine.
    Abstracts away the underlying tool (FFmpeg) from the business logic.
    """

    @abstractmethod
    def split(self, request: SegmentRequest) -> List[Path]:
        """
        Splits the source video into fixed-length segments without re-encoding.

        Returns:
            Produced segment files, sorted lexically (= temporal order).

        Raises:
            SegmentationError: If the underlying process fails or times out.
        """
        pass
