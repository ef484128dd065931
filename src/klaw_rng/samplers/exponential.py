"""Exponential distribution via a one-sided ziggurat."""

from __future__ import annotations

import functools
import math
from typing import TYPE_CHECKING

from klaw_rng._config import DEFAULT_ZIGGURAT_TABLE_SIZE, get_config, is_initialized
from klaw_rng.errors import ArgumentOutOfRangeError
from klaw_rng.samplers._checks import require_positive
from klaw_rng.samplers.ziggurat import (
    DEFAULT_EPSILON,
    OneSidedZigguratTable,
    build_one_sided_table,
    sample_one_sided,
    table_magnitude,
)

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = [
    'LN2',
    'TOTAL_AREA',
    'ExponentialSampler',
    'TruncatedExponentialSampler',
    'build_exponential_table',
    'cumulative',
    'default_exponential_table',
    'density',
    'exponential_sample',
    'inverse_density',
    'standard_exponential',
    'truncated_exponential_sample',
]

TOTAL_AREA = 1.0
LN2 = 0.69314718055994531


def density(x: float) -> float:
    return math.exp(-x)


def inverse_density(y: float) -> float:
    if y > 0.0:
        return -math.log(y)
    return math.inf if y == 0.0 else math.nan


def cumulative(x: float) -> float:
    return 1.0 - math.exp(-x)


@functools.cache
def build_exponential_table(
    table_size: int = DEFAULT_ZIGGURAT_TABLE_SIZE, epsilon: float = DEFAULT_EPSILON
) -> OneSidedZigguratTable:
    """Build (once per size and epsilon) the unit-rate exponential ziggurat."""
    return build_one_sided_table(table_magnitude(table_size), density, inverse_density, cumulative, TOTAL_AREA, epsilon)


def default_exponential_table() -> OneSidedZigguratTable:
    """Table sized from ``RngConfig.ziggurat_table_size`` (256 before ``init()``)."""
    size = get_config().ziggurat_table_size if is_initialized() else DEFAULT_ZIGGURAT_TABLE_SIZE
    return build_exponential_table(size)


def _resolve_table(table: OneSidedZigguratTable | None, table_size: int | None) -> OneSidedZigguratTable:
    if table is not None:
        return table
    if table_size is not None:
        return build_exponential_table(table_size)
    return default_exponential_table()


def standard_exponential(engine: BitEngine, table: OneSidedZigguratTable | None = None) -> float:
    """Draw from the exponential distribution with rate 1.

    The distribution is memoryless, so the tail beyond the base edge is just
    another full draw shifted by that edge.
    """
    table = table if table is not None else default_exponential_table()
    return sample_one_sided(engine, table, density, lambda e, x_min: standard_exponential(e, table) + x_min)


def _validate_truncation(rate: float, upper: float) -> None:
    require_positive(rate, 'rate', 'The event rate must be greater than zero.')
    if upper * rate < LN2:
        raise ArgumentOutOfRangeError('upper', 'The constrained range must cover at least half the distribution.', upper)


def exponential_sample(engine: BitEngine, rate: float, *, table: OneSidedZigguratTable | None = None) -> float:
    """Draw the waiting time until the next event at ``rate`` events per unit."""
    require_positive(rate, 'rate', 'The event rate must be greater than zero.')
    return standard_exponential(engine, table) / rate


def truncated_exponential_sample(
    engine: BitEngine, rate: float, upper: float, *, table: OneSidedZigguratTable | None = None
) -> float:
    """Draw an exponential waiting time no greater than ``upper``, by rejection."""
    _validate_truncation(rate, upper)
    table = table if table is not None else default_exponential_table()
    while True:
        sample = standard_exponential(engine, table) / rate
        if sample <= upper:
            return sample


class ExponentialSampler:
    """Precomputed exponential sampler bound to one table."""

    __slots__ = ('_engine', '_rate', '_table')

    def __init__(
        self,
        engine: BitEngine,
        rate: float = 1.0,
        *,
        table: OneSidedZigguratTable | None = None,
        table_size: int | None = None,
    ) -> None:
        require_positive(rate, 'rate', 'The event rate must be greater than zero.')
        self._engine = engine
        self._rate = rate
        self._table = _resolve_table(table, table_size)

    @property
    def table(self) -> OneSidedZigguratTable:
        return self._table

    def next(self) -> float:
        return standard_exponential(self._engine, self._table) / self._rate


class TruncatedExponentialSampler:
    """Precomputed exponential sampler restricted to ``[0, upper]``."""

    __slots__ = ('_engine', '_rate', '_table', '_upper')

    def __init__(
        self,
        engine: BitEngine,
        rate: float,
        upper: float,
        *,
        table: OneSidedZigguratTable | None = None,
        table_size: int | None = None,
    ) -> None:
        _validate_truncation(rate, upper)
        self._engine = engine
        self._rate = rate
        self._upper = upper
        self._table = _resolve_table(table, table_size)

    def next(self) -> float:
        while True:
            sample = standard_exponential(self._engine, self._table) / self._rate
            if sample <= self._upper:
                return sample
