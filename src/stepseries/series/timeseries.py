"""Fixed-step series of float samples indexed by absolute time."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator as IteratorABC
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import numpy as np
from attrs import define, field

from stepseries.logging import get_logger
from stepseries.math.utils import (
    FloatArray,
    NumericInput,
    filled,
    owned_samples,
    shift,
    to_numpy,
    truncated_steps,
)
from stepseries.output.utils import format_values

if TYPE_CHECKING:
    from .iterators import Iterator, TimeValueIterator
    from .transforms import SupportsTransform

logger = get_logger(__name__)


class SeriesError(ValueError):
    """Raised when a series cannot be built from the given bounds."""


class StepError(SeriesError):
    """The step duration is unusable (zero or negative)."""


class RangeError(SeriesError):
    """The start timestamp falls after the end timestamp."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _reject(error: SeriesError, key: str) -> SeriesError:
    logger.debug("series.rejected", key=key, reason=str(error))
    return error


def _resolve_bounds(
    key: str,
    start: datetime | None,
    end: datetime | None,
    step: timedelta,
    count: int,
) -> tuple[datetime, datetime, int]:
    """Validate bounds and return ``(start, end, length)``.

    An unknown ``end`` is placed ``count`` steps after ``start``.
    """
    if not step:
        raise _reject(StepError("step can't be 0"), key)
    if start is None:
        start = _now()
    if end is None:
        end = shift(start, step, count)
    if start > end:
        raise _reject(RangeError(f"start time {start} can't be after end time {end}"), key)
    if start != end and not step:
        raise _reject(StepError("step size can't be 0 if start != end time"), key)

    length = truncated_steps(end - start, step)
    if length < 0:
        raise _reject(StepError("step can't be negative if start != end time"), key)
    return start, end, length


def _validate_step(instance: TimeSeries, attribute: object, value: timedelta) -> None:
    if not value:
        raise StepError("step can't be 0")
    # Keeps end >= start for every length the series can grow to.
    if value < timedelta(0):
        raise StepError("step can't be negative")


@define(slots=True, eq=False)
class TimeSeries:
    """Samples spaced exactly ``step`` apart, the first one sitting at ``start``.

    Sample ``i`` belongs to timestamp ``start + i * step``. The sample array
    is private: :meth:`data` and :meth:`copy` hand out copies, and the
    constructor copies whatever it is given.
    """

    key: str
    _start: datetime
    _step: timedelta = field(validator=_validate_step)
    _data: FloatArray = field(factory=lambda: filled(0, math.nan), converter=owned_samples, repr=False)
    _filler: float = field(default=math.nan, converter=float)

    @classmethod
    def from_filler(
        cls,
        key: str,
        start: datetime | None,
        end: datetime | None,
        step: timedelta,
        filler: float,
    ) -> TimeSeries:
        """Build a series whose every slot holds ``filler``.

        ``filler`` is also used for later extensions. With no ``end`` the
        series holds a single slot.
        """
        start, _, length = _resolve_bounds(key, start, end, step, 1)
        return cls(key, start, step, filled(length, filler), filler=filler)

    @classmethod
    def from_samples(
        cls,
        key: str,
        start: datetime | None,
        step: timedelta,
        samples: NumericInput = (),
        *,
        end: datetime | None = None,
    ) -> TimeSeries:
        """Build a series seeded positionally from ``samples``; the filler is NaN.

        Without ``end`` the samples alone decide the length. With an ``end``
        further out than the samples reach, the trailing slots are ``0.0``.
        With one closer in, the extra samples are dropped. Given no samples
        at all, every slot is NaN.
        """
        values = to_numpy(samples)
        if values.ndim != 1:
            raise ValueError("Samples must be a 1D sequence.")
        start, _, length = _resolve_bounds(key, start, end, step, len(values))
        if not len(values):
            return cls(key, start, step, filled(length, math.nan))

        data = np.zeros(length, dtype=np.float64)
        seeded = min(length, len(values))
        data[:seeded] = values[:seeded]
        return cls(key, start, step, data)

    @property
    def start(self) -> datetime:
        return self._start

    @property
    def step(self) -> timedelta:
        return self._step

    @property
    def end(self) -> datetime:
        """Timestamp one step past the last sample."""
        return shift(self._start, self._step, len(self._data))

    @property
    def filler(self) -> float:
        return self._filler

    def data(self) -> FloatArray:
        """Return an independent copy of the samples, in order."""
        return self._data.copy()

    def copy(self) -> TimeSeries:
        """Return a deep copy; changes to either series never reach the other."""
        return TimeSeries(self.key, self._start, self._step, self._data, filler=self._filler)

    def is_equal_step(self, other: TimeSeries) -> bool:
        """Return True when both series use the same step duration."""
        return self._step == other._step

    def timestamp_at(self, index: int) -> datetime:
        """Return the timestamp that sample ``index`` stands for."""
        return shift(self._start, self._step, index)

    def items(self) -> IteratorABC[tuple[datetime, float]]:
        """Yield ``(timestamp, value)`` pairs over a snapshot of the samples."""
        for i, value in enumerate(self.data()):
            yield self.timestamp_at(i), float(value)

    def _index(self, when: datetime) -> int | None:
        if when < self._start:
            return None
        last = shift(self._start, self._step, len(self._data) - 1)
        if when > last:
            return None
        return truncated_steps(when - self._start, self._step)

    def get_at(self, when: datetime) -> tuple[float, bool]:
        """Return ``(value, True)`` for the sample covering ``when``, else ``(nan, False)``.

        Timestamps between two steps resolve to the earlier sample.
        """
        index = self._index(when)
        if index is None:
            return math.nan, False
        return float(self._data[index]), True

    def set_at(self, when: datetime, value: float) -> bool:
        """Overwrite the sample covering ``when``; return False when out of range."""
        index = self._index(when)
        if index is None:
            return False
        self._data[index] = value
        return True

    def _append(self, values: FloatArray) -> None:
        if not len(values):
            return
        self._data = np.concatenate((self._data, values))
        logger.debug("series.extended", key=self.key, added=len(values), length=len(self._data))

    def extend_to(self, when: datetime) -> None:
        """Grow with filler slots until the series covers ``when``.

        Nothing happens when ``when`` lies before :attr:`end`.
        """
        end = self.end
        if when < end:
            return
        points = truncated_steps(when + self._step - end, self._step)
        self._append(filled(points, self._filler))

    def extend_by(self, duration: timedelta) -> None:
        """Append one filler slot per whole ``step`` contained in ``duration``."""
        points = truncated_steps(duration, self._step)
        self._append(filled(points, self._filler))

    def extend_with(self, *values: float) -> None:
        """Append ``values`` verbatim after the last sample."""
        self._append(owned_samples(values))

    def transform(self, transform: SupportsTransform) -> TimeSeries:
        """Return a derived series with ``transform`` applied to every sample.

        The derived key reads ``"<name>(<key>)"``; this series is left as is.
        """
        derived = self.copy()
        derived.key = f"{transform.name}({self.key})"
        derived._data = np.fromiter(
            (transform.transform(float(v)) for v in self._data),
            dtype=np.float64,
            count=len(self._data),
        )
        logger.debug("series.transformed", key=self.key, derived=derived.key)
        return derived

    def iterator(self) -> Iterator:
        """Return a cursor yielding ``(value, found)`` from :attr:`start` onwards."""
        from .iterators import Iterator

        return Iterator(self)

    def time_value_iterator(self) -> TimeValueIterator:
        """Return a cursor yielding ``(timestamp, value, found)`` from :attr:`start` onwards."""
        from .iterators import TimeValueIterator

        return TimeValueIterator(self)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> IteratorABC[float]:
        return (float(v) for v in self.data())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        same_filler = self._filler == other._filler or (
            math.isnan(self._filler) and math.isnan(other._filler)
        )
        return (
            self.key == other.key
            and self._start == other._start
            and self._step == other._step
            and same_filler
            and np.array_equal(self._data, other._data, equal_nan=True)
        )

    def __str__(self) -> str:
        header = (
            f"{self.key} Start: {self._start} End: {self.end} "
            f"Step: {self._step} Length: {len(self._data)}"
        )
        if not len(self._data):
            return header
        return f"{header} {format_values(self._data)}"


def new_time_series(
    key: str,
    start: datetime | None,
    end: datetime | None,
    step: timedelta,
    *values: float,
) -> TimeSeries:
    """Build a series from bounds and optional samples.

    A single value fills every slot and becomes the filler. Zero or several
    values seed the series from index 0 (see :meth:`TimeSeries.from_samples`).
    ``start=None`` means now and ``end=None`` lets the values set the length.
    """
    if len(values) == 1:
        return TimeSeries.from_filler(key, start, end, step, values[0])
    return TimeSeries.from_samples(key, start, step, values, end=end)


def new_time_series_of_time_range(
    key: str,
    start: datetime | None,
    end: datetime,
    step: timedelta,
    filler: float,
) -> TimeSeries:
    """Build a filled series covering ``start`` through ``end`` inclusive."""
    return TimeSeries.from_filler(key, start, end + step, step, filler)


def new_time_series_of_length(
    key: str,
    start: datetime | None,
    step: timedelta,
    length: int,
    filler: float,
) -> TimeSeries:
    """Build a filled series with ``length`` slots."""
    if start is None:
        start = _now()
    return TimeSeries.from_filler(key, start, shift(start, step, length), step, filler)


def new_time_series_of_data(
    key: str,
    start: datetime | None,
    step: timedelta,
    data: Iterable[float],
) -> TimeSeries:
    """Build a series holding ``data`` as is; its length decides the end."""
    return TimeSeries.from_samples(key, start, step, to_numpy(data))


__all__ = [
    "RangeError",
    "SeriesError",
    "StepError",
    "TimeSeries",
    "new_time_series",
    "new_time_series_of_data",
    "new_time_series_of_length",
    "new_time_series_of_time_range",
]
