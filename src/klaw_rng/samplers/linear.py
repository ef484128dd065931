"""Linear distribution: density falls or rises in a straight line across an interval.

Sampling inverts the quadratic CDF directly. Of the two algebraically equal
root formulas, the one that avoids cancellation is chosen from the sign of
the linear coefficient (the "citardauq" form when it is non-negative).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import msgspec

from klaw_rng.errors import InvalidArgumentError
from klaw_rng.samplers._checks import require_less, require_non_negative
from klaw_rng.samplers.uniform import UniformSampler
from klaw_rng.unit import double_cc

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = ['LinearSampler', 'LinearSegment', 'linear_sample', 'make_linear_sampler']


def validate_linear(x0: float, y0: float, x1: float, y1: float) -> None:
    require_less(x0, x1, 'x1', 'The upper range boundary must be greater than the lower range boundary.')
    require_non_negative(y0, 'y0')
    require_non_negative(y1, 'y1')
    if y0 == 0.0 and y1 == 0.0:
        raise InvalidArgumentError('y1', 'The probability distribution must have a positive area.')


class LinearSegment(msgspec.Struct, frozen=True, gc=False):
    """Quadratic CDF coefficients of one straight-line density segment.

    ``invert(u)`` solves ``a*x**2 + b*x + c0 - scaled_area*u == 0`` for ``x``
    in absolute coordinates.
    """

    a: float
    a4: float
    b: float
    b2: float
    c0: float
    scaled_area: float

    @classmethod
    def from_points(cls, x0: float, y0: float, x1: float, y1: float) -> LinearSegment:
        x_delta = x1 - x0
        y_delta = y1 - y0
        area = 0.5 * x_delta * (y0 + y1)
        a = 0.5 * y_delta
        b = x1 * y0 - x0 * y1
        return cls(
            a=a,
            a4=y_delta * 2.0,
            b=b,
            b2=b * b,
            c0=-(a * x0 + b) * x0,
            scaled_area=area * x_delta,
        )

    def invert(self, u: float) -> float:
        c = self.c0 - self.scaled_area * u
        if self.a == 0.0:
            return -c / self.b
        if self.b >= 0.0:
            return _citardauq(self, c)
        return _quadratic(self, c)


def _root(segment: LinearSegment, c: float) -> float:
    # Zero where the density touches zero; rounding may push it just below.
    return math.sqrt(max(segment.b2 - segment.a4 * c, 0.0))


def _citardauq(segment: LinearSegment, c: float) -> float:
    d = segment.b + _root(segment, c)
    return -2.0 * c / d if d != 0.0 else 0.0


def _quadratic(segment: LinearSegment, c: float) -> float:
    return -0.5 * (segment.b - _root(segment, c)) / segment.a


def linear_sample(engine: BitEngine, x0: float, y0: float, x1: float, y1: float) -> float:
    """Draw one value from the density through ``(x0, y0)`` and ``(x1, y1)``."""
    validate_linear(x0, y0, x1, y1)
    u = double_cc(engine)
    if y0 == y1:
        return u * (x1 - x0) + x0
    return LinearSegment.from_points(x0, y0, x1, y1).invert(u)


class LinearSampler:
    """Precomputed linear sampler; the root formula is fixed at construction."""

    __slots__ = ('_engine', '_segment', '_solve')

    def __init__(self, engine: BitEngine, x0: float, y0: float, x1: float, y1: float) -> None:
        validate_linear(x0, y0, x1, y1)
        self._engine = engine
        self._segment = LinearSegment.from_points(x0, y0, x1, y1)
        self._solve = _citardauq if self._segment.b >= 0.0 else _quadratic

    @property
    def segment(self) -> LinearSegment:
        return self._segment

    def next(self) -> float:
        segment = self._segment
        return self._solve(segment, segment.c0 - segment.scaled_area * double_cc(self._engine))


def make_linear_sampler(
    engine: BitEngine, x0: float, y0: float, x1: float, y1: float
) -> LinearSampler | UniformSampler:
    """Return the cheapest sampler for the shape: uniform when ``y0 == y1``."""
    validate_linear(x0, y0, x1, y1)
    if y0 == y1:
        return UniformSampler(engine, x0, x1)
    return LinearSampler(engine, x0, y0, x1, y1)
