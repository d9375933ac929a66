"""Fixed-step series, their cursors, and per-sample transforms."""

from .iterators import Iterator, TimeValueIterator
from .timeseries import (
    RangeError,
    SeriesError,
    StepError,
    TimeSeries,
    new_time_series,
    new_time_series_of_data,
    new_time_series_of_length,
    new_time_series_of_time_range,
)
from .transforms import SupportsTransform, Transform, named, parse_transform

__all__ = [
    "Iterator",
    "RangeError",
    "SeriesError",
    "StepError",
    "SupportsTransform",
    "TimeSeries",
    "TimeValueIterator",
    "Transform",
    "named",
    "new_time_series",
    "new_time_series_of_data",
    "new_time_series_of_length",
    "new_time_series_of_time_range",
    "parse_transform",
]
