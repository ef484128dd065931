"""Trapezoidal distribution: a rising ramp, a flat plateau, a falling ramp."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from klaw_rng.samplers._checks import require_less
from klaw_rng.unit import double_oo

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = ['TrapezoidalSampler', 'trapezoidal_sample']


def _validate(x0: float, x1: float, x2: float, x3: float) -> None:
    require_less(x0, x1, 'x1', 'The lower plateau boundary must be greater than the lower range boundary.')
    require_less(x1, x2, 'x2', 'The upper plateau boundary must be greater than the lower plateau boundary.')
    require_less(x2, x3, 'x3', 'The upper range boundary must be greater than the upper plateau boundary.')


def trapezoidal_sample(engine: BitEngine, x0: float, x1: float, x2: float, x3: float) -> float:
    """Draw one value from the trapezoid whose plateau spans ``[x1, x2]``."""
    _validate(x0, x1, x2, x3)
    n = double_oo(engine)
    full = x3 + x2 - x1 - x0
    lower = x1 - x0
    lower_split = lower / full
    if n < lower_split:
        return x0 + math.sqrt(n * full * lower)
    mid = x2 - x1
    upper_split = (mid + mid + lower) / full
    if n > upper_split:
        return x3 - math.sqrt((1.0 - n) * full * (x3 - x2))
    return x1 + (n - lower_split) / (upper_split - lower_split) * mid


class TrapezoidalSampler:
    """Precomputed trapezoidal sampler."""

    __slots__ = (
        '_engine',
        '_lower_area',
        '_lower_split',
        '_plateau_scale',
        '_upper_area',
        '_upper_split',
        '_x0',
        '_x1',
        '_x3',
    )

    def __init__(self, engine: BitEngine, x0: float, x1: float, x2: float, x3: float) -> None:
        _validate(x0, x1, x2, x3)
        full = x3 + x2 - x1 - x0
        lower = x1 - x0
        mid = x2 - x1
        self._engine = engine
        self._x0 = x0
        self._x1 = x1
        self._x3 = x3
        self._lower_area = full * lower
        self._upper_area = full * (x3 - x2)
        self._lower_split = lower / full
        self._upper_split = (mid + mid + lower) / full
        self._plateau_scale = mid / (self._upper_split - self._lower_split)

    def next(self) -> float:
        n = double_oo(self._engine)
        if n < self._lower_split:
            return self._x0 + math.sqrt(n * self._lower_area)
        if n > self._upper_split:
            return self._x3 - math.sqrt((1.0 - n) * self._upper_area)
        return self._x1 + (n - self._lower_split) * self._plateau_scale
