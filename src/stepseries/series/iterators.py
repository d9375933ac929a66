"""Cursors that walk a series one step at a time."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from attrs import define, field

if TYPE_CHECKING:
    from .timeseries import TimeSeries


@define(slots=True)
class _Cursor:
    """Position in time over a series it does not own.

    Reads go through :meth:`TimeSeries.get_at`, so an extended series is
    visible on the next read.
    """

    series: TimeSeries
    position: datetime = field()

    @position.default
    def _start_position(self) -> datetime:
        return self.series.start

    def advance(self) -> tuple[datetime, float, bool]:
        """Read at the current position, then move one step forward regardless."""
        at = self.position
        value, found = self.series.get_at(at)
        self.position = at + self.series.step
        return at, value, found

    def rewind_to_last(self) -> tuple[datetime, float, bool]:
        """Park on the final sample and read it without moving on."""
        self.position = self.series.end - self.series.step
        value, found = self.series.get_at(self.position)
        return self.position, value, found


@define(slots=True, init=False)
class Iterator:
    """Yields ``(value, found)`` pairs starting at the first sample.

    Once past the end every call reports ``found=False``; build a new
    iterator to start over.
    """

    _cursor: _Cursor

    def __init__(self, series: TimeSeries) -> None:
        self._cursor = _Cursor(series)

    @property
    def cursor(self) -> datetime:
        return self._cursor.position

    def next(self) -> tuple[float, bool]:
        _, value, found = self._cursor.advance()
        return value, found

    def last(self) -> tuple[float, bool]:
        _, value, found = self._cursor.rewind_to_last()
        return value, found


@define(slots=True, init=False)
class TimeValueIterator:
    """Like :class:`Iterator` but also reports the timestamp that was read."""

    _cursor: _Cursor

    def __init__(self, series: TimeSeries) -> None:
        self._cursor = _Cursor(series)

    @property
    def cursor(self) -> datetime:
        return self._cursor.position

    def next(self) -> tuple[datetime, float, bool]:
        return self._cursor.advance()

    def last(self) -> tuple[datetime, float, bool]:
        return self._cursor.rewind_to_last()


__all__ = ["Iterator", "TimeValueIterator"]
