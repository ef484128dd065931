"""Triangular distribution: linear rise to a mode, linear fall after it."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from klaw_rng.samplers._checks import require_less
from klaw_rng.unit import double_oo

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = ['TriangularSampler', 'triangular_sample']


def _validate(x0: float, x1: float, x2: float) -> None:
    require_less(x0, x1, 'x1', 'The mode must be greater than the lower range boundary.')
    require_less(x1, x2, 'x2', 'The upper range boundary must be greater than the mode.')


def triangular_sample(engine: BitEngine, x0: float, x1: float, x2: float) -> float:
    """Draw one value from the triangle with lower bound ``x0``, mode ``x1`` and upper bound ``x2``.

    The open-interval draw keeps both square roots away from zero, so the
    bounds themselves are never returned.
    """
    _validate(x0, x1, x2)
    n = double_oo(engine)
    full = x2 - x0
    lower = x1 - x0
    if n < lower / full:
        return x0 + math.sqrt(n * full * lower)
    return x2 - math.sqrt((1.0 - n) * full * (x2 - x1))


class TriangularSampler:
    """Precomputed triangular sampler."""

    __slots__ = ('_engine', '_lower_area', '_split', '_upper_area', '_x0', '_x2')

    def __init__(self, engine: BitEngine, x0: float, x1: float, x2: float) -> None:
        _validate(x0, x1, x2)
        full = x2 - x0
        self._engine = engine
        self._x0 = x0
        self._x2 = x2
        self._lower_area = full * (x1 - x0)
        self._upper_area = full * (x2 - x1)
        self._split = (x1 - x0) / full

    def next(self) -> float:
        n = double_oo(self._engine)
        if n < self._split:
            return self._x0 + math.sqrt(n * self._lower_area)
        return self._x2 - math.sqrt((1.0 - n) * self._upper_area)
