"""klaw-rng: Deterministic random engines and continuous distribution samplers.

Engines produce reproducible bit streams that can be saved, restored,
reseeded and jumped far ahead. Samplers turn those bits into values from
uniform, triangular, trapezoidal, linear, Hermite spline, piecewise, normal
and exponential distributions.

Flat imports (preferred):
    from klaw_rng import XorShiftAdd, SeedDiffuser, NormalSampler
    from klaw_rng import create_engine, init, snapshot, restore

Submodule imports (for organization):
    from klaw_rng.engines import SplitMix64, create_engine
    from klaw_rng.samplers import PiecewiseLinearSampler, triangular_sample
    from klaw_rng.unit import double_co, range_cc
"""

# Config
from klaw_rng._config import EngineKind, RngConfig, get_config, init, is_initialized

# Logging
from klaw_rng._logging import add_log_hook, clear_log_hooks, configure_logging, get_logger, remove_log_hook

# Engines
from klaw_rng.engine import BitEngine, Engine
from klaw_rng.engines import SplitMix64, XoroShiro128Plus, XorShiftAdd, create_engine, engine_type

# Errors
from klaw_rng.errors import (
    ArgumentOutOfRange,
    ArgumentOutOfRangeError,
    InvalidArgument,
    InvalidArgumentError,
    InvalidState,
    InvalidStateError,
    UnsupportedOperation,
    UnsupportedOperationError,
)

# Samplers
from klaw_rng.samplers import (
    ExponentialSampler,
    HermiteKnot,
    HermiteSampler,
    LinearSampler,
    NormalSampler,
    PiecewiseHermiteSampler,
    PiecewiseLinearSampler,
    PiecewiseUniformSampler,
    PiecewiseWeightedUniformSampler,
    Sampler,
    TrapezoidalSampler,
    TriangularSampler,
    TruncatedExponentialSampler,
    TruncatedNormalSampler,
    UniformSampler,
    exponential_sample,
    hermite_sample,
    linear_sample,
    make_hermite_sampler,
    make_linear_sampler,
    normal_sample,
    piecewise_hermite_sample,
    piecewise_linear_sample,
    piecewise_uniform_sample,
    piecewise_weighted_uniform_sample,
    trapezoidal_sample,
    triangular_sample,
    truncated_exponential_sample,
    truncated_normal_sample,
    uniform_sample,
)

# Seeding
from klaw_rng.seed import EntropyCounter, SeedDiffuser, SeedMaterial, seed_source

# Persistence
from klaw_rng.snapshot import EngineSnapshot, decode, encode, restore, snapshot

# Unit draws
from klaw_rng.unit import below, double_cc, double_co, double_oc, double_oo, range_cc, range_co

__all__ = [
    'ArgumentOutOfRange',
    'ArgumentOutOfRangeError',
    'BitEngine',
    'Engine',
    'EngineKind',
    'EngineSnapshot',
    'EntropyCounter',
    'ExponentialSampler',
    'HermiteKnot',
    'HermiteSampler',
    'InvalidArgument',
    'InvalidArgumentError',
    'InvalidState',
    'InvalidStateError',
    'LinearSampler',
    'NormalSampler',
    'PiecewiseHermiteSampler',
    'PiecewiseLinearSampler',
    'PiecewiseUniformSampler',
    'PiecewiseWeightedUniformSampler',
    'RngConfig',
    'Sampler',
    'SeedDiffuser',
    'SeedMaterial',
    'SplitMix64',
    'TrapezoidalSampler',
    'TriangularSampler',
    'TruncatedExponentialSampler',
    'TruncatedNormalSampler',
    'UniformSampler',
    'UnsupportedOperation',
    'UnsupportedOperationError',
    'XoroShiro128Plus',
    'XorShiftAdd',
    'add_log_hook',
    'below',
    'clear_log_hooks',
    'configure_logging',
    'create_engine',
    'decode',
    'double_cc',
    'double_co',
    'double_oc',
    'double_oo',
    'encode',
    'engine_type',
    'exponential_sample',
    'get_config',
    'get_logger',
    'hermite_sample',
    'init',
    'is_initialized',
    'linear_sample',
    'make_hermite_sampler',
    'make_linear_sampler',
    'normal_sample',
    'piecewise_hermite_sample',
    'piecewise_linear_sample',
    'piecewise_uniform_sample',
    'piecewise_weighted_uniform_sample',
    'range_cc',
    'range_co',
    'remove_log_hook',
    'restore',
    'seed_source',
    'snapshot',
    'trapezoidal_sample',
    'triangular_sample',
    'truncated_exponential_sample',
    'truncated_normal_sample',
    'uniform_sample',
]
