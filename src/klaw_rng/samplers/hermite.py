"""Cubic Hermite spline distribution over one segment.

The density is the Hermite cubic through ``(x0, y0)`` and ``(x1, y1)`` with
end slopes ``m0`` and ``m1``. Its CDF is a quartic with no convenient closed
form inverse, so sampling solves for the root numerically with a Halley
iteration seeded at the uniform draw itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import msgspec

from klaw_rng.errors import ArgumentOutOfRangeError, InvalidArgumentError
from klaw_rng.samplers._checks import require_less, require_non_negative
from klaw_rng.samplers.linear import make_linear_sampler
from klaw_rng.unit import double_cc

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine
    from klaw_rng.samplers.linear import LinearSampler
    from klaw_rng.samplers.uniform import UniformSampler

__all__ = [
    'FIND_ROOT_EPSILON',
    'FIND_ROOT_ITERATIONS',
    'HermiteSampler',
    'HermiteSegment',
    'find_root',
    'hermite_sample',
    'make_hermite_sampler',
]

FIND_ROOT_ITERATIONS = 32
FIND_ROOT_EPSILON = 2.0**-32

_NEGATIVE = 'The domain must be entirely non-negative.'


def validate_hermite(x0: float, y0: float, m0: float, x1: float, y1: float, m1: float) -> None:
    require_less(x0, x1, 'x1', 'The upper range boundary must be greater than the lower range boundary.')
    require_non_negative(y0, 'y0')
    require_non_negative(y1, 'y1')
    if y0 == 0.0 and m0 < 0.0:
        raise ArgumentOutOfRangeError('m0', _NEGATIVE, m0)
    if y1 == 0.0 and m1 > 0.0:
        raise ArgumentOutOfRangeError('m1', _NEGATIVE, m1)
    if y0 == 0.0 and m0 == 0.0 and y1 == 0.0 and m1 == 0.0:
        raise InvalidArgumentError('m1', 'The area under the spline must be positive.')


def find_root(k4: float, k3: float, k2: float, k1: float, area: float, t: float) -> float:
    """Solve ``k4 x^4 + k3 x^3 + k2 x^2 + k1 x == area * t`` for ``x`` in ``[0, 1]``.

    Halley's method from ``x = t``, which is exact when the density is flat.
    Stops after ``FIND_ROOT_ITERATIONS`` steps, on a step smaller than
    ``FIND_ROOT_EPSILON``, or when the update's denominator vanishes.

    Returns:
        The root in normalized segment coordinates.
    """
    x = t
    k0 = -area * t
    k4t4 = 4.0 * k4
    k3t3 = 3.0 * k3
    k2t2 = 2.0 * k2
    k4t12 = 12.0 * k4
    k3t6 = 6.0 * k3
    for _ in range(FIND_ROOT_ITERATIONS):
        f0 = (((k4 * x + k3) * x + k2) * x + k1) * x + k0
        f1 = ((k4t4 * x + k3t3) * x + k2t2) * x + k1
        f2 = (k4t12 * x + k3t6) * x + k2t2
        d = 2.0 * f1 * f1 - f0 * f2
        if d == 0.0:
            return x
        x_next = x - 2.0 * f0 * f1 / d
        if abs(x_next - x) < FIND_ROOT_EPSILON:
            return x_next
        x = x_next
    return x


class HermiteSegment(msgspec.Struct, frozen=True, gc=False):
    """Normalized quartic CDF coefficients of one Hermite density segment.

    Attributes:
        x0: Left edge of the segment.
        x_delta: Segment width.
        k4, k3, k2, k1: CDF coefficients over the unit interval.
        area: CDF at 1, i.e. the segment area divided by its width.
    """

    x0: float
    x_delta: float
    k4: float
    k3: float
    k2: float
    k1: float
    area: float

    @classmethod
    def from_points(cls, x0: float, y0: float, m0: float, x1: float, y1: float, m1: float) -> HermiteSegment:
        x_delta = x1 - x0
        y_delta = y1 - y0
        a = -2.0 * y_delta + (m0 + m1) * x_delta
        b = 3.0 * y_delta - (2.0 * m0 + m1) * x_delta
        c = m0 * x_delta
        k4 = a / 4.0
        k3 = b / 3.0
        k2 = c / 2.0
        k1 = y0
        return cls(x0=x0, x_delta=x_delta, k4=k4, k3=k3, k2=k2, k1=k1, area=k4 + k3 + k2 + k1)

    @property
    def scaled_area(self) -> float:
        """Area under the density in absolute coordinates."""
        return self.area * self.x_delta

    def invert(self, u: float) -> float:
        return find_root(self.k4, self.k3, self.k2, self.k1, self.area, u) * self.x_delta + self.x0


def hermite_sample(engine: BitEngine, x0: float, y0: float, m0: float, x1: float, y1: float, m1: float) -> float:
    """Draw one value from the Hermite spline density segment."""
    validate_hermite(x0, y0, m0, x1, y1, m1)
    return HermiteSegment.from_points(x0, y0, m0, x1, y1, m1).invert(double_cc(engine))


class HermiteSampler:
    """Precomputed Hermite spline sampler."""

    __slots__ = ('_engine', '_segment')

    def __init__(self, engine: BitEngine, x0: float, y0: float, m0: float, x1: float, y1: float, m1: float) -> None:
        validate_hermite(x0, y0, m0, x1, y1, m1)
        self._engine = engine
        self._segment = HermiteSegment.from_points(x0, y0, m0, x1, y1, m1)

    @property
    def segment(self) -> HermiteSegment:
        return self._segment

    def next(self) -> float:
        s = self._segment
        return find_root(s.k4, s.k3, s.k2, s.k1, s.area, double_cc(self._engine)) * s.x_delta + s.x0


def make_hermite_sampler(
    engine: BitEngine, x0: float, y0: float, m0: float, x1: float, y1: float, m1: float
) -> HermiteSampler | LinearSampler | UniformSampler:
    """Return the cheapest sampler for the shape.

    A spline whose quartic and cubic CDF terms both vanish is a straight
    line, and is handed to ``make_linear_sampler``.
    """
    validate_hermite(x0, y0, m0, x1, y1, m1)
    segment = HermiteSegment.from_points(x0, y0, m0, x1, y1, m1)
    if segment.k4 == 0.0 and segment.k3 == 0.0:
        return make_linear_sampler(engine, x0, y0, x1, y1)
    return HermiteSampler(engine, x0, y0, m0, x1, y1, m1)
