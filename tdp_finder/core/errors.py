# tdp_finder/core/errors.py
from __future__ import annotations


class TdpFinderError(Exception):
    """Base class for every error raised by the dataset builder and annotator."""


class InvalidArgument(TdpFinderError, TypeError):
    """Input collection missing or of the wrong shape."""


class MissingField(TdpFinderError, LookupError):
    """A record lacks a required field."""

    def __init__(self, field: str, index: int | None = None):
        where = f" (record {index})" if index is not None else ""
        super().__init__(f"{field} not provided{where}")
        self.field = field
        self.index = index


class UnknownProcessor(TdpFinderError, LookupError):
    def __init__(self, processor: str):
        super().__init__(
            f"physical-processor {processor} not found in database. "
            f"Please check spelling / contribute to the dataset."
        )
        self.processor = processor


class DataLoadError(TdpFinderError, RuntimeError):
    """Reference data could not be read or parsed."""
