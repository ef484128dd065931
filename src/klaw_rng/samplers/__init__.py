"""
klaw_rng.samplers: Continuous distributions drawn from any BitEngine.

Every distribution comes in two forms: a one-shot ``<name>_sample(engine, ...)``
function that validates and draws once, and a precomputed ``<Name>Sampler``
that validates at construction and then draws through ``next()``.
"""

from typing import Protocol, runtime_checkable

from klaw_rng.samplers._cdf import CdfTable
from klaw_rng.samplers.exponential import (
    ExponentialSampler,
    TruncatedExponentialSampler,
    build_exponential_table,
    exponential_sample,
    standard_exponential,
    truncated_exponential_sample,
)
from klaw_rng.samplers.hermite import HermiteSampler, HermiteSegment, hermite_sample, make_hermite_sampler
from klaw_rng.samplers.linear import LinearSampler, LinearSegment, linear_sample, make_linear_sampler
from klaw_rng.samplers.normal import (
    NormalSampler,
    TruncatedNormalSampler,
    build_normal_table,
    normal_sample,
    standard_normal,
    truncated_normal_sample,
)
from klaw_rng.samplers.piecewise import (
    HermiteKnot,
    PiecewiseHermiteSampler,
    PiecewiseLinearSampler,
    PiecewiseSampler,
    PiecewiseUniformSampler,
    PiecewiseWeightedUniformSampler,
    piecewise_hermite_sample,
    piecewise_linear_sample,
    piecewise_uniform_sample,
    piecewise_weighted_uniform_sample,
)
from klaw_rng.samplers.trapezoidal import TrapezoidalSampler, trapezoidal_sample
from klaw_rng.samplers.triangular import TriangularSampler, triangular_sample
from klaw_rng.samplers.uniform import UniformSampler, uniform_sample
from klaw_rng.samplers.ziggurat import (
    OneSidedZigguratTable,
    TwoSidedZigguratTable,
    ZigguratSegment,
    build_one_sided_table,
    build_two_sided_table,
)


@runtime_checkable
class Sampler(Protocol):
    """A precomputed generator: one value per ``next()`` call."""

    def next(self) -> float: ...


__all__ = [
    'CdfTable',
    # Exponential
    'ExponentialSampler',
    # Hermite
    'HermiteKnot',
    'HermiteSampler',
    'HermiteSegment',
    # Linear
    'LinearSampler',
    'LinearSegment',
    # Normal
    'NormalSampler',
    # Ziggurat
    'OneSidedZigguratTable',
    # Piecewise
    'PiecewiseHermiteSampler',
    'PiecewiseLinearSampler',
    'PiecewiseSampler',
    'PiecewiseUniformSampler',
    'PiecewiseWeightedUniformSampler',
    'Sampler',
    # Trapezoidal / triangular / uniform
    'TrapezoidalSampler',
    'TriangularSampler',
    'TruncatedExponentialSampler',
    'TruncatedNormalSampler',
    'TwoSidedZigguratTable',
    'UniformSampler',
    'ZigguratSegment',
    'build_exponential_table',
    'build_normal_table',
    'build_one_sided_table',
    'build_two_sided_table',
    'exponential_sample',
    'hermite_sample',
    'linear_sample',
    'make_hermite_sampler',
    'make_linear_sampler',
    'normal_sample',
    'piecewise_hermite_sample',
    'piecewise_linear_sample',
    'piecewise_uniform_sample',
    'piecewise_weighted_uniform_sample',
    'standard_exponential',
    'standard_normal',
    'trapezoidal_sample',
    'triangular_sample',
    'truncated_exponential_sample',
    'truncated_normal_sample',
    'uniform_sample',
]
