"""Piecewise distributions: a chain of simple segments under one density.

Each distribution is reduced to a list of positive-area segments plus their
weights. One-shot functions walk that list with a single ranged draw;
precomputed samplers replace the walk with a ``CdfTable`` and pick a
segment with one raw integer draw. Either way a second draw then places the
value inside the chosen segment through its ``invert(u)``.

Segments with zero area are dropped at build time, so they can never be
selected.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol, Self

import msgspec

from klaw_rng.errors import ArgumentOutOfRangeError
from klaw_rng.samplers._cdf import CdfTable, table_bits
from klaw_rng.samplers._checks import (
    require_increasing,
    require_length,
    require_min_length,
    require_non_negative,
    require_positive_area,
)
from klaw_rng.samplers.hermite import HermiteSegment
from klaw_rng.samplers.linear import LinearSegment
from klaw_rng.unit import double_co, range_cc

if TYPE_CHECKING:
    from collections.abc import Sequence

    from klaw_rng.engine import BitEngine

__all__ = [
    'HermiteKnot',
    'Keyframe',
    'PiecewiseHermiteSampler',
    'PiecewiseLinearSampler',
    'PiecewiseSampler',
    'PiecewiseUniformSampler',
    'PiecewiseWeightedUniformSampler',
    'Segment',
    'UniformSegment',
    'from_keyframes',
    'from_points',
    'knots_from_arrays',
    'piecewise_hermite_sample',
    'piecewise_linear_sample',
    'piecewise_uniform_sample',
    'piecewise_weighted_uniform_sample',
]


# --- Segments ---


class UniformSegment(msgspec.Struct, frozen=True, gc=False):
    """Flat density over ``[x0, x1)``."""

    x0: float
    x1: float

    def invert(self, u: float) -> float:
        return self.x0 + u * (self.x1 - self.x0)


class Segment(Protocol):
    """Anything that maps a unit draw to a position inside its span."""

    def invert(self, u: float) -> float: ...


type Segments = tuple[list[float], list[Segment]]


# --- Hermite knots ---


class HermiteKnot(msgspec.Struct, frozen=True, gc=False):
    """One control point of a piecewise Hermite density.

    Attributes:
        x: Position; strictly increasing along the curve.
        y: Density at ``x``.
        in_slope: Slope arriving from the previous segment.
        out_slope: Slope leaving toward the next segment.
    """

    x: float
    y: float
    in_slope: float = 0.0
    out_slope: float = 0.0


class Keyframe(Protocol):
    """Animation-curve style keyframe accepted by ``from_keyframes()``."""

    @property
    def time(self) -> float: ...

    @property
    def value(self) -> float: ...

    @property
    def in_tangent(self) -> float: ...

    @property
    def out_tangent(self) -> float: ...


def knots_from_arrays(x: Sequence[float], y: Sequence[float], m: Sequence[float]) -> list[HermiteKnot]:
    """Zip parallel arrays into knots.

    ``m`` holds two slopes per segment: ``m[2*i]`` leaves knot ``i`` and
    ``m[2*i + 1]`` arrives at knot ``i + 1``.
    """
    require_min_length(x, 2, 'x')
    require_length(y, len(x), 'y')
    require_length(m, 2 * (len(x) - 1), 'm')
    last = len(x) - 1
    return [
        HermiteKnot(
            x=x[i],
            y=y[i],
            in_slope=m[2 * i - 1] if i > 0 else 0.0,
            out_slope=m[2 * i] if i < last else 0.0,
        )
        for i in range(len(x))
    ]


def from_points(points: Sequence[tuple[float, float]], slopes: Sequence[float]) -> list[HermiteKnot]:
    """Knots from ``(x, y)`` pairs and the same two-per-segment slope layout as ``m``."""
    return knots_from_arrays([p[0] for p in points], [p[1] for p in points], slopes)


def from_keyframes(keyframes: Sequence[Keyframe]) -> list[HermiteKnot]:
    """Knots from keyframes carrying ``time``, ``value`` and both tangents."""
    require_min_length(keyframes, 2, 'keyframes')
    return [HermiteKnot(k.time, k.value, k.in_tangent, k.out_tangent) for k in keyframes]


# --- Segment builders ---


def _keep_positive(pairs: list[tuple[float, Segment]], param: str) -> Segments:
    weights = []
    segments = []
    total = 0.0
    for weight, segment in pairs:
        if weight > 0.0:
            weights.append(weight)
            segments.append(segment)
            total += weight
    require_positive_area(total, param)
    return weights, segments


def _uniform_segments(x: Sequence[float], weights: Sequence[float], param: str, *, by_area: bool) -> Segments:
    require_min_length(x, 2, 'x')
    require_length(weights, len(x) - 1, param)
    require_increasing(x)
    pairs: list[tuple[float, Segment]] = []
    for i, weight in enumerate(weights):
        require_non_negative(weight, param, 'The weight of a segment must not be negative.')
        area = (x[i + 1] - x[i]) * weight if by_area else weight
        pairs.append((area, UniformSegment(x[i], x[i + 1])))
    return _keep_positive(pairs, param)


def _linear_segments(x: Sequence[float], y: Sequence[float]) -> Segments:
    require_min_length(x, 2, 'x')
    require_length(y, len(x), 'y')
    require_increasing(x)
    for value in y:
        require_non_negative(value, 'y')
    pairs: list[tuple[float, Segment]] = []
    for x0, y0, x1, y1 in zip(x, y, x[1:], y[1:], strict=False):
        # Twice the trapezoid area; only relative weight matters.
        pairs.append(((x1 - x0) * (y0 + y1), LinearSegment.from_points(x0, y0, x1, y1)))
    return _keep_positive(pairs, 'y')


def _hermite_segments(knots: Sequence[HermiteKnot]) -> Segments:
    require_min_length(knots, 2, 'x')
    require_increasing([k.x for k in knots])
    for knot in knots:
        require_non_negative(knot.y, 'y')
    pairs: list[tuple[float, Segment]] = []
    for k0, k1 in zip(knots, knots[1:], strict=False):
        x0, y0, m0 = k0.x, k0.y, k0.out_slope
        x1, y1, m1 = k1.x, k1.y, k1.in_slope
        if math.isinf(m0) or math.isinf(m1):
            # A vertical tangent makes a step: flat at y0 across the segment.
            segment = HermiteSegment.from_points(x0, y0, 0.0, x1, y0, 0.0)
            pairs.append((y0 * (x1 - x0), segment))
            continue
        if y0 == 0.0 and m0 < 0.0:
            raise ArgumentOutOfRangeError('m', 'The domain must be entirely non-negative.', m0)
        if y1 == 0.0 and m1 > 0.0:
            raise ArgumentOutOfRangeError('m', 'The domain must be entirely non-negative.', m1)
        segment = HermiteSegment.from_points(x0, y0, m0, x1, y1, m1)
        pairs.append((segment.scaled_area, segment))
    return _keep_positive(pairs, 'y')


# --- One-shot sampling ---


def _pick(engine: BitEngine, weights: list[float], *, inclusive: bool = False) -> int:
    total = 0.0
    for weight in weights:
        total += weight
    n = range_cc(engine, 0.0, total)
    for i, weight in enumerate(weights):
        total -= weight
        if total < n or (inclusive and total == n):
            return i
    return len(weights) - 1


def _sample(engine: BitEngine, built: Segments, *, inclusive: bool = False) -> float:
    weights, segments = built
    segment = segments[_pick(engine, weights, inclusive=inclusive)]
    return segment.invert(double_co(engine))


def piecewise_uniform_sample(engine: BitEngine, x: Sequence[float], y: Sequence[float]) -> float:
    """Draw from a step density: height ``y[i]`` over ``[x[i], x[i+1])``."""
    return _sample(engine, _uniform_segments(x, y, 'y', by_area=True))


def piecewise_weighted_uniform_sample(engine: BitEngine, x: Sequence[float], weights: Sequence[float]) -> float:
    """Draw from ``len(weights)`` uniform ranges chosen with the given relative weights."""
    return _sample(engine, _uniform_segments(x, weights, 'weights', by_area=False), inclusive=True)


def piecewise_linear_sample(engine: BitEngine, x: Sequence[float], y: Sequence[float]) -> float:
    """Draw from the density linearly interpolated through ``(x[i], y[i])``."""
    return _sample(engine, _linear_segments(x, y))


def piecewise_hermite_sample(
    engine: BitEngine, x: Sequence[float], y: Sequence[float], m: Sequence[float]
) -> float:
    """Draw from the Hermite spline density through ``(x[i], y[i])`` with slopes ``m``.

    An infinite slope on either end of a segment turns it into a step at
    ``y[i]``.
    """
    return _sample(engine, _hermite_segments(knots_from_arrays(x, y, m)))


# --- Precomputed samplers ---


class PiecewiseSampler:
    """Segment table plus integer CDF; ``next()`` costs two engine draws.

    The CDF width follows the engine: 32-bit engines get a 32-bit table
    drawn with ``next32()``, everything else a 64-bit table.
    """

    __slots__ = ('_cdf', '_engine', '_segments')

    def __init__(self, engine: BitEngine, built: Segments) -> None:
        weights, segments = built
        self._engine = engine
        self._segments = tuple(segments)
        self._cdf = CdfTable.build(weights, table_bits(engine))

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def cdf(self) -> CdfTable:
        return self._cdf

    def next(self) -> float:
        segment = self._segments[self._cdf.draw(self._engine)]
        return segment.invert(double_co(self._engine))

    def __repr__(self) -> str:
        return f'{type(self).__name__}(segments={len(self._segments)}, bits={self._cdf.bits})'


class PiecewiseUniformSampler(PiecewiseSampler):
    """Precomputed step density sampler."""

    __slots__ = ()

    def __init__(self, engine: BitEngine, x: Sequence[float], y: Sequence[float]) -> None:
        super().__init__(engine, _uniform_segments(x, y, 'y', by_area=True))


class PiecewiseWeightedUniformSampler(PiecewiseSampler):
    """Precomputed weighted-ranges sampler."""

    __slots__ = ()

    def __init__(self, engine: BitEngine, x: Sequence[float], weights: Sequence[float]) -> None:
        super().__init__(engine, _uniform_segments(x, weights, 'weights', by_area=False))


class PiecewiseLinearSampler(PiecewiseSampler):
    """Precomputed piecewise linear sampler."""

    __slots__ = ()

    def __init__(self, engine: BitEngine, x: Sequence[float], y: Sequence[float]) -> None:
        super().__init__(engine, _linear_segments(x, y))


class PiecewiseHermiteSampler(PiecewiseSampler):
    """Precomputed piecewise Hermite sampler.

    Build from parallel arrays, or from knots, points or keyframes through
    the class methods; they all end in the same knot sequence.
    """

    __slots__ = ()

    def __init__(self, engine: BitEngine, x: Sequence[float], y: Sequence[float], m: Sequence[float]) -> None:
        super().__init__(engine, _hermite_segments(knots_from_arrays(x, y, m)))

    @classmethod
    def from_knots(cls, engine: BitEngine, knots: Sequence[HermiteKnot]) -> Self:
        sampler = cls.__new__(cls)
        PiecewiseSampler.__init__(sampler, engine, _hermite_segments(knots))
        return sampler

    @classmethod
    def from_points(cls, engine: BitEngine, points: Sequence[tuple[float, float]], slopes: Sequence[float]) -> Self:
        return cls.from_knots(engine, from_points(points, slopes))

    @classmethod
    def from_keyframes(cls, engine: BitEngine, keyframes: Sequence[Keyframe]) -> Self:
        return cls.from_knots(engine, from_keyframes(keyframes))
