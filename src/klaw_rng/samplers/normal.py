"""Normal (Gaussian) distribution via a two-sided ziggurat."""

from __future__ import annotations

import functools
import math
from typing import TYPE_CHECKING

from klaw_rng._config import DEFAULT_ZIGGURAT_TABLE_SIZE, get_config, is_initialized
from klaw_rng.errors import ArgumentOutOfRangeError, InvalidArgumentError
from klaw_rng.samplers._checks import require_positive
from klaw_rng.samplers.ziggurat import (
    DEFAULT_EPSILON,
    TwoSidedZigguratTable,
    build_two_sided_table,
    sample_two_sided,
    table_magnitude,
)
from klaw_rng.unit import double_oo

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = [
    'TOTAL_AREA',
    'NormalSampler',
    'TruncatedNormalSampler',
    'build_normal_table',
    'cumulative',
    'default_normal_table',
    'density',
    'inverse_density',
    'normal_sample',
    'standard_normal',
    'tail_fallback',
    'truncated_normal_sample',
]

# sqrt(2 * pi): area under exp(-x**2 / 2).
TOTAL_AREA = 2.506628274631


def density(x: float) -> float:
    return math.exp(-x * x * 0.5)


def inverse_density(y: float) -> float:
    """Positive ``x`` with ``density(x) == y``; NaN above 1 and inf at 0."""
    if math.isnan(y):
        return math.nan
    y2 = y * y
    if y2 == 0.0:
        return math.inf
    ratio = 1.0 / y2
    if ratio <= 0.0:
        return math.nan
    v = math.log(ratio)
    return math.sqrt(v) if v >= 0.0 else math.nan


def cumulative(x: float) -> float:
    """Area under ``density`` from ``-inf`` to ``x >= 0`` (Zelen & Severo)."""
    t = 1.0 / (1.0 + 0.2316419 * x)
    poly = ((((1.330274429 * t - 1.821255978) * t + 1.781477937) * t - 0.356563782) * t + 0.319381530) * t
    return TOTAL_AREA - density(x) * poly


def tail_fallback(engine: BitEngine, x_min: float) -> float:
    """Marsaglia's tail method beyond ``|x_min|``, on the side of its sign."""
    while True:
        x = -math.log(double_oo(engine)) / x_min
        y = -math.log(double_oo(engine))
        if y * 2.0 > x * x:
            return x_min + x


@functools.cache
def build_normal_table(table_size: int = DEFAULT_ZIGGURAT_TABLE_SIZE, epsilon: float = DEFAULT_EPSILON) -> TwoSidedZigguratTable:
    """Build (once per size and epsilon) the standard normal ziggurat."""
    return build_two_sided_table(table_magnitude(table_size), density, inverse_density, cumulative, TOTAL_AREA, epsilon)


def default_normal_table() -> TwoSidedZigguratTable:
    """Table sized from ``RngConfig.ziggurat_table_size`` (256 before ``init()``)."""
    size = get_config().ziggurat_table_size if is_initialized() else DEFAULT_ZIGGURAT_TABLE_SIZE
    return build_normal_table(size)


def _resolve_table(table: TwoSidedZigguratTable | None, table_size: int | None) -> TwoSidedZigguratTable:
    if table is not None:
        return table
    if table_size is not None:
        return build_normal_table(table_size)
    return default_normal_table()


def standard_normal(engine: BitEngine, table: TwoSidedZigguratTable | None = None) -> float:
    """Draw from the normal distribution with mean 0 and standard deviation 1."""
    return sample_two_sided(engine, table if table is not None else default_normal_table(), density, tail_fallback)


def _validate_truncation(mean: float, sd: float, lower: float, upper: float) -> None:
    require_positive(sd, 'sd', 'The standard deviation must be greater than zero.')
    if lower > mean:
        raise ArgumentOutOfRangeError('lower', 'The lower bound must not be greater than the mean.', lower)
    if upper < mean:
        raise ArgumentOutOfRangeError('upper', 'The upper bound must not be less than the mean.', upper)
    if upper - lower < sd:
        raise InvalidArgumentError('upper', 'The constrained range must span at least one standard deviation.')


def normal_sample(engine: BitEngine, mean: float, sd: float, *, table: TwoSidedZigguratTable | None = None) -> float:
    """Draw one value from N(mean, sd**2)."""
    require_positive(sd, 'sd', 'The standard deviation must be greater than zero.')
    return standard_normal(engine, table) * sd + mean


def truncated_normal_sample(
    engine: BitEngine,
    mean: float,
    sd: float,
    lower: float,
    upper: float,
    *,
    table: TwoSidedZigguratTable | None = None,
) -> float:
    """Draw from N(mean, sd**2) restricted to ``[lower, upper]`` by rejection."""
    _validate_truncation(mean, sd, lower, upper)
    table = table if table is not None else default_normal_table()
    while True:
        sample = standard_normal(engine, table) * sd + mean
        if lower <= sample <= upper:
            return sample


class NormalSampler:
    """Precomputed normal sampler bound to one table."""

    __slots__ = ('_engine', '_mean', '_sd', '_table')

    def __init__(
        self,
        engine: BitEngine,
        mean: float = 0.0,
        sd: float = 1.0,
        *,
        table: TwoSidedZigguratTable | None = None,
        table_size: int | None = None,
    ) -> None:
        require_positive(sd, 'sd', 'The standard deviation must be greater than zero.')
        self._engine = engine
        self._mean = mean
        self._sd = sd
        self._table = _resolve_table(table, table_size)

    @property
    def table(self) -> TwoSidedZigguratTable:
        return self._table

    def next(self) -> float:
        return sample_two_sided(self._engine, self._table, density, tail_fallback) * self._sd + self._mean


class TruncatedNormalSampler:
    """Precomputed normal sampler restricted to ``[lower, upper]``."""

    __slots__ = ('_engine', '_lower', '_mean', '_sd', '_table', '_upper')

    def __init__(
        self,
        engine: BitEngine,
        mean: float,
        sd: float,
        lower: float,
        upper: float,
        *,
        table: TwoSidedZigguratTable | None = None,
        table_size: int | None = None,
    ) -> None:
        _validate_truncation(mean, sd, lower, upper)
        self._engine = engine
        self._mean = mean
        self._sd = sd
        self._lower = lower
        self._upper = upper
        self._table = _resolve_table(table, table_size)

    def next(self) -> float:
        while True:
            sample = sample_two_sided(self._engine, self._table, density, tail_fallback) * self._sd + self._mean
            if self._lower <= sample <= self._upper:
                return sample
