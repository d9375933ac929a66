"""Named per-sample transforms and a registry to look them up by spec string."""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from attrs import define, field

ValueFunc = Callable[[float], float]
TransformFactory = Callable[..., "Transform"]


@runtime_checkable
class SupportsTransform(Protocol):
    """Anything with a ``name`` and a pure ``transform(value)`` method."""

    @property
    def name(self) -> str: ...

    def transform(self, value: float) -> float: ...


@define(slots=True, frozen=True)
class Transform:
    """A pure scalar mapping tagged with the name used for derived keys."""

    name: str
    func: ValueFunc = field(repr=False)

    def transform(self, value: float) -> float:
        return float(self.func(value))

    def __call__(self, value: float) -> float:
        return self.transform(value)


def named(name: str) -> Callable[[ValueFunc], Transform]:
    """Decorator turning a ``float -> float`` function into a :class:`Transform`."""

    def wrap(func: ValueFunc) -> Transform:
        return Transform(name, func)

    return wrap


@named("abs")
def absolute(value: float) -> float:
    return abs(value)


@named("neg")
def negate(value: float) -> float:
    return -value


def scale(factor: float) -> Transform:
    """Multiply every sample by ``factor``."""
    factor = float(factor)
    return Transform(f"scale[{factor:g}]", lambda value: value * factor)


def offset(delta: float) -> Transform:
    """Add ``delta`` to every sample."""
    delta = float(delta)
    return Transform(f"offset[{delta:g}]", lambda value: value + delta)


def clip(lower: float, upper: float) -> Transform:
    """Bound every sample to ``[lower, upper]``; NaN passes through."""
    lower, upper = float(lower), float(upper)
    if lower > upper:
        raise ValueError("clip lower bound must not exceed the upper bound.")

    def bound(value: float) -> float:
        if math.isnan(value):
            return value
        return min(max(value, lower), upper)

    return Transform(f"clip[{lower:g},{upper:g}]", bound)


def fill_missing(value: float) -> Transform:
    """Replace NaN samples, such as unfilled slots, with ``value``."""
    replacement = float(value)
    return Transform(
        f"fill[{replacement:g}]",
        lambda sample: replacement if math.isnan(sample) else sample,
    )


_REGISTRY: dict[str, TransformFactory] = {
    "abs": lambda: absolute,
    "neg": lambda: negate,
    "scale": scale,
    "offset": offset,
    "clip": clip,
    "fill": fill_missing,
}


def register_transform(name: str, factory: TransformFactory) -> None:
    """Make ``factory`` reachable through :func:`parse_transform` as ``name``."""
    if name in _REGISTRY:
        raise ValueError(f"Transform '{name}' is already registered")
    _REGISTRY[name] = factory


def available_transforms() -> list[str]:
    return sorted(_REGISTRY)


def parse_transform(text: str) -> Transform:
    """Resolve ``"name"`` or ``"name:arg[,arg...]"`` into a :class:`Transform`.

    >>> parse_transform("scale:2").transform(1.5)
    3.0
    """
    name, _, raw_args = text.strip().partition(":")
    factory = _REGISTRY.get(name)
    if factory is None:
        available = ", ".join(available_transforms()) or "(none)"
        raise ValueError(f"Unknown transform '{name}'. Available: {available}")
    try:
        args = [float(arg) for arg in raw_args.split(",")] if raw_args else []
    except ValueError as exc:
        raise ValueError(f"Transform arguments must be numeric: {raw_args!r}") from exc
    try:
        return factory(*args)
    except TypeError as exc:
        raise ValueError(f"Wrong number of arguments for transform '{name}': {text!r}") from exc


__all__ = [
    "SupportsTransform",
    "Transform",
    "absolute",
    "available_transforms",
    "clip",
    "fill_missing",
    "named",
    "negate",
    "offset",
    "parse_transform",
    "register_transform",
    "scale",
]
