"""Step arithmetic and NumPy helpers for fixed-step series."""

from .utils import (  # noqa: F401
    TICK,
    FloatArray,
    NumericInput,
    filled,
    owned_samples,
    shift,
    to_numpy,
    truncated_steps,
)

__all__ = [
    "TICK",
    "FloatArray",
    "NumericInput",
    "filled",
    "owned_samples",
    "shift",
    "to_numpy",
    "truncated_steps",
]
