"""Uniform distribution over a closed interval."""

from __future__ import annotations

from typing import TYPE_CHECKING

from klaw_rng.samplers._checks import require_less
from klaw_rng.unit import double_cc, range_cc

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = ['UniformSampler', 'uniform_sample']

_ORDER = 'The upper range boundary must be greater than the lower range boundary.'


def uniform_sample(engine: BitEngine, x0: float, x1: float) -> float:
    """Draw one value uniformly from ``[x0, x1]``."""
    require_less(x0, x1, 'x1', _ORDER)
    return range_cc(engine, x0, x1)


class UniformSampler:
    """Precomputed uniform sampler over ``[x0, x1]``."""

    __slots__ = ('_engine', '_range', '_x0')

    def __init__(self, engine: BitEngine, x0: float, x1: float) -> None:
        require_less(x0, x1, 'x1', _ORDER)
        self._engine = engine
        self._x0 = x0
        self._range = x1 - x0

    def next(self) -> float:
        return double_cc(self._engine) * self._range + self._x0

    def __repr__(self) -> str:
        return f'UniformSampler(x0={self._x0}, x1={self._x0 + self._range})'
