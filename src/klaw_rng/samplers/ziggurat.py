"""Ziggurat tables: build them for a decreasing density, and sample from them.

A ziggurat covers the density with ``2**magnitude`` stacked rectangles of
equal area plus a base segment that also owns the tail. One raw 64-bit draw
supplies both the segment index (low bits) and the position inside it (high
bits); the bulk of draws accept on a single integer comparison.

Tables are frozen msgspec structs, so they can be persisted and shipped like
any other record.

See Also:
    Marsaglia & Tsang, "The Ziggurat Method for Generating Random Variables".
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

import msgspec

from klaw_rng._logging import get_logger
from klaw_rng.errors import InvalidArgumentError
from klaw_rng.types import TableMagnitude, Word64
from klaw_rng.unit import range_co

if TYPE_CHECKING:
    from collections.abc import Callable

    from klaw_rng.engine import BitEngine

__all__ = [
    'DEFAULT_EPSILON',
    'OneSidedZigguratTable',
    'TwoSidedZigguratTable',
    'ZigguratSegment',
    'build_one_sided_table',
    'build_two_sided_table',
    'sample_one_sided',
    'sample_two_sided',
    'table_magnitude',
]

_logger = get_logger(__name__)

type Curve = Callable[[float], float]
type TailSampler = Callable[[BitEngine, float], float]

DEFAULT_EPSILON = 1e-10

_MAX_EXPANSIONS = 100
_MAX_BISECTIONS = 1000


class ZigguratSegment(msgspec.Struct, frozen=True, gc=False, array_like=True):
    """One rectangle of a ziggurat.

    Attributes:
        n: Integer acceptance threshold; draws below it are fully inside.
        s: Scale from the integer draw to ``x``.
    """

    n: Word64
    s: float


class OneSidedZigguratTable(msgspec.Struct, frozen=True, gc=False):
    """Ziggurat over ``[0, inf)`` sampled from unsigned draws."""

    segments: tuple[ZigguratSegment, ...]
    upper_bounds: tuple[float, ...]
    mask: int
    shift: TableMagnitude


class TwoSidedZigguratTable(msgspec.Struct, frozen=True, gc=False):
    """Ziggurat for a density symmetric about zero, sampled from signed draws.

    Attributes:
        threshold: Signed draws below this are redrawn, which keeps the
            negative half exactly as large as the positive half.
    """

    segments: tuple[ZigguratSegment, ...]
    upper_bounds: tuple[float, ...]
    threshold: int
    mask: int
    shift: TableMagnitude


def table_magnitude(table_size: int) -> int:
    """log2 of ``table_size``.

    Raises:
        InvalidArgumentError: Unless the size is a power of two in ``[4, 65536]``.
    """
    if table_size < 4 or table_size > 65_536 or table_size & (table_size - 1):
        msg = f'Lookup table size must be a power of two between 4 and 65536, got {table_size}.'
        raise InvalidArgumentError('table_size', msg)
    return table_size.bit_length() - 1


# --- Building ---


def _table_error(r: float, x: list[float], f: Curve, f_inv: Curve, cdf: Curve, total_area: float) -> float:
    """Base-segment area minus top-segment area for base edge ``r``.

    Positive means ``r`` should grow. NaN means the stack overshot the top of
    the density, which also means ``r`` should grow.
    """
    count = len(x)
    x[0] = r
    x[-1] = 0.0
    v = r * f(r) + total_area - cdf(r)
    x_prev = r
    for i in range(1, count - 1):
        if x_prev == 0.0:
            return math.nan
        x_prev = f_inv(v / x_prev + f(x_prev))
        x[i] = x_prev
        if math.isnan(x_prev) or x_prev < 0.0:
            return math.nan
    return v - x_prev * (f(0.0) - f(x_prev))


def _x_values(
    count: int,
    f: Curve,
    f_inv: Curve,
    cdf: Curve,
    total_area: float,
    active_area: float,
    epsilon: float,
) -> tuple[list[float], int]:
    x = [0.0] * count
    a = active_area / count
    r_min = f_inv(f(0.0) / count)
    r_max = r_min
    for _ in range(_MAX_EXPANSIONS):
        r_max = f_inv(f(r_max) * 0.5)
        if not r_max * f(r_max) + total_area - cdf(r_max) > a:
            break
    else:
        raise InvalidArgumentError('f_inv', 'Could not bracket the base segment edge.')

    for iteration in range(1, _MAX_BISECTIONS + 1):
        r = (r_min + r_max) * 0.5
        exhausted = r in (r_min, r_max)
        error = _table_error(r, x, f, f_inv, cdf, total_area)
        if not math.isnan(error) and abs(error) <= epsilon:
            return x, iteration
        if exhausted:
            if math.isnan(error):
                break
            _logger.warning('ziggurat_table_imprecise', size=count, error=error, epsilon=epsilon)
            return x, iteration
        if math.isnan(error) or error > 0.0:
            r_min = r
        else:
            r_max = r
    raise InvalidArgumentError('epsilon', 'The ziggurat table did not converge.')


def _build(
    magnitude: int,
    f: Curve,
    f_inv: Curve,
    cdf: Curve,
    total_area: float,
    active_area: float,
    epsilon: float,
    scale: float,
) -> tuple[tuple[ZigguratSegment, ...], tuple[float, ...]]:
    count = 1 << magnitude
    start = time.perf_counter()
    x, iterations = _x_values(count, f, f_inv, cdf, total_area, active_area, epsilon)

    y0 = f(x[0])
    a0 = x[0] * y0
    v = a0 + total_area - cdf(x[0])
    segments = [ZigguratSegment(math.floor(a0 / v * scale), v / y0 / scale)]
    upper_bounds = [y0]
    for i in range(1, count):
        segments.append(ZigguratSegment(math.floor(x[i] / x[i - 1] * scale), x[i - 1] / scale))
        upper_bounds.append(f(x[i]))

    _logger.debug(
        'ziggurat_table_built',
        size=count,
        iterations=iterations,
        base_edge=x[0],
        duration_ms=round((time.perf_counter() - start) * 1000, 3),
    )
    return tuple(segments), tuple(upper_bounds)


def build_one_sided_table(
    magnitude: int,
    f: Curve,
    f_inv: Curve,
    cdf: Curve,
    total_area: float,
    epsilon: float = DEFAULT_EPSILON,
) -> OneSidedZigguratTable:
    """Build a ziggurat for a density that decreases on ``[0, inf)``.

    Args:
        magnitude: log2 of the segment count (2 to 16).
        f: The (unnormalized) density.
        f_inv: Inverse of ``f``; must return NaN or inf outside its domain
            rather than raise.
        cdf: Integral of ``f`` from the start of its support to ``x``.
        total_area: Integral of ``f`` over its whole support.
        epsilon: Accepted difference between base and top segment areas.
    """
    table_magnitude(1 << magnitude)
    segments, upper_bounds = _build(
        magnitude, f, f_inv, cdf, total_area, total_area, epsilon, float(1 << (64 - magnitude))
    )
    return OneSidedZigguratTable(segments, upper_bounds, (1 << magnitude) - 1, magnitude)


def build_two_sided_table(
    magnitude: int,
    f: Curve,
    f_inv: Curve,
    cdf: Curve,
    total_area: float,
    epsilon: float = DEFAULT_EPSILON,
) -> TwoSidedZigguratTable:
    """Build a ziggurat for a density symmetric about zero.

    Same arguments as ``build_one_sided_table``; ``total_area`` covers both
    halves and each half is tiled separately.
    """
    table_magnitude(1 << magnitude)
    segments, upper_bounds = _build(
        magnitude, f, f_inv, cdf, total_area, total_area * 0.5, epsilon, float(1 << (63 - magnitude))
    )
    count = 1 << magnitude
    return TwoSidedZigguratTable(segments, upper_bounds, -(1 << 63) + count, count - 1, magnitude)


# --- Sampling ---


def sample_one_sided(engine: BitEngine, table: OneSidedZigguratTable, f: Curve, tail: TailSampler) -> float:
    """Draw one value from a one-sided table.

    ``tail(engine, x_min)`` is called for the rare draws that land beyond
    the base segment's edge ``x_min``.
    """
    segments = table.segments
    upper_bounds = table.upper_bounds
    mask = table.mask
    shift = table.shift
    while True:
        n = engine.next64()
        i = n & mask
        n >>= shift
        segment = segments[i]
        x = n * segment.s
        if n < segment.n:
            return x
        if i == 0:
            return tail(engine, (1 << (64 - shift)) * segments[1].s)
        if range_co(engine, upper_bounds[i - 1], upper_bounds[i]) < f(x):
            return x


def sample_two_sided(engine: BitEngine, table: TwoSidedZigguratTable, f: Curve, tail: TailSampler) -> float:
    """Draw one value from a two-sided table.

    ``tail(engine, x_min)`` receives a signed edge: negative for draws in
    the lower tail.
    """
    segments = table.segments
    upper_bounds = table.upper_bounds
    threshold = table.threshold
    mask = table.mask
    shift = table.shift
    while True:
        n = engine.next64()
        if n >= 1 << 63:
            n -= 1 << 64
        while n < threshold:
            n = engine.next64()
            if n >= 1 << 63:
                n -= 1 << 64
        i = n & mask
        n >>= shift
        segment = segments[i]
        x = n * segment.s
        if abs(n) < segment.n:
            return x
        if i == 0:
            return tail(engine, (1 << (63 - shift)) * segments[1].s * (1.0 if n > 0 else -1.0))
        if range_co(engine, upper_bounds[i - 1], upper_bounds[i]) < f(x):
            return x
