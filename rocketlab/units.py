"""Tagged unit values and range-clamping helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeVar, Union

T = TypeVar("T", int, float)


@dataclass(frozen=True, slots=True)
class _StrongValue:
    value: float = 0.0

    def __float__(self) -> float:
        return float(self.value)


@dataclass(frozen=True, slots=True)
class Seconds(_StrongValue):
    """A duration in seconds."""


@dataclass(frozen=True, slots=True)
class Meters(_StrongValue):
    """A length in metres."""


@dataclass(frozen=True, slots=True)
class Kilograms(_StrongValue):
    """A mass in kilograms."""


@dataclass(frozen=True, slots=True)
class Newton(_StrongValue):
    """A force in newtons."""


Quantity = Union[Seconds, Meters, Kilograms, Newton]


def value_of(value: Quantity) -> float:
    """The plain number held by a unit value."""
    return value.value


def clamp_to_range(value: T, min_value: T, max_value: T) -> T:
    """Clamp a value into [min_value, max_value]."""
    if min_value > max_value:
        raise ValueError(f"empty range: {min_value!r} > {max_value!r}")
    return max(min_value, min(value, max_value))


def clamp_finite(value: float, fallback: float, min_value: float, max_value: float) -> float:
    """Clamp a value into range, using the fallback when it is NaN or infinite."""
    if not math.isfinite(value):
        return fallback
    return clamp_to_range(value, min_value, max_value)


def clamp_finite_int(value: int, fallback: int, min_value: int, max_value: int) -> int:
    """Clamp an integer into range; integers are always finite, so fallback is unused."""
    return clamp_to_range(value, min_value, max_value)