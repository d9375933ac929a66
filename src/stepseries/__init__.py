"""Fixed-step, time-indexed numeric series."""

from .series import (
    Iterator,
    RangeError,
    SeriesError,
    StepError,
    TimeSeries,
    TimeValueIterator,
    Transform,
    new_time_series,
    new_time_series_of_data,
    new_time_series_of_length,
    new_time_series_of_time_range,
)

__version__ = "0.1.0"

__all__ = [
    "Iterator",
    "RangeError",
    "SeriesError",
    "StepError",
    "TimeSeries",
    "TimeValueIterator",
    "Transform",
    "new_time_series",
    "new_time_series_of_data",
    "new_time_series_of_length",
    "new_time_series_of_time_range",
]
