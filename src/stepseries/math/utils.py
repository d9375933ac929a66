"""Common helpers for step arithmetic and sample coercion."""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import TypeAlias, cast

import numpy as np
import numpy.typing as npt

FloatArray: TypeAlias = npt.NDArray[np.float64]
NumericInput: TypeAlias = npt.ArrayLike | Iterable[float]

# Finest resolution a timedelta can carry.
TICK = timedelta(microseconds=1)


def to_numpy(values: NumericInput) -> FloatArray:
    """Coerce the input sequence into a NumPy float array."""
    if not isinstance(values, np.ndarray | Sequence):
        values = list(values)
    return cast(FloatArray, np.asarray(values, dtype=np.float64))


def owned_samples(values: NumericInput) -> FloatArray:
    """Return a fresh 1D float64 array that shares no memory with ``values``."""
    arr = np.array(to_numpy(values), dtype=np.float64, copy=True)
    if arr.ndim != 1:
        raise ValueError("Samples must be a 1D sequence.")
    return arr


def filled(size: int, value: float) -> FloatArray:
    """Return ``size`` slots all holding ``value``."""
    return np.full(max(size, 0), value, dtype=np.float64)


def truncated_steps(span: timedelta, step: timedelta) -> int:
    """Return ``span / step`` truncated toward zero.

    The division runs on whole microsecond ticks so the result never drifts
    the way float division would. Python's ``//`` floors, which differs from
    truncation once either operand is negative, so the sign is applied after
    dividing magnitudes.
    """
    if not step:
        raise ZeroDivisionError("step must be non-zero")
    numerator = span // TICK
    denominator = step // TICK
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def shift(origin: datetime, step: timedelta, count: int) -> datetime:
    """Return the timestamp ``count`` steps away from ``origin``."""
    return origin + step * count
