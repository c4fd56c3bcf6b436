# File: streetsmart/core/common/errors.py


class PipelineError(Exception):
    """
    Base class for every failure the video pipeline knows how to classify.
    The message is what ends up in `processing_error`.
    """


class ValidationError(PipelineError):
    """Required input missing or the asset cannot be located. No state change."""


class DownloadError(PipelineError):
    """The source video could not be fetched from storage."""


class ProbeError(PipelineError):
    """The media probe failed or returned unusable output."""


class ExtractionError(PipelineError):
    """GPS extraction failed. Soft: degrades to an empty track."""


class SegmentationError(PipelineError):
    """The stream splitter failed or produced nothing."""


class UploadError(PipelineError):
    """A clip could not be written to storage. Soft, per clip."""


class PersistenceError(PipelineError):
    """A database write failed."""
