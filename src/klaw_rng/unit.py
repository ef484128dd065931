"""Unit-interval and range draws on top of any ``BitEngine``.

The interval suffix names which ends are included: ``co`` is ``[0, 1)``,
``oc`` is ``(0, 1]``, ``oo`` is ``(0, 1)`` and ``cc`` is ``[0, 1]``. Every
double carries 52 random bits, so consecutive representable outputs are
exactly ``2**-52`` apart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from klaw_rng.errors import ArgumentOutOfRangeError

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine

__all__ = [
    'below',
    'double_cc',
    'double_co',
    'double_oc',
    'double_oo',
    'range_cc',
    'range_co',
]

_MANTISSA_MASK = (1 << 52) - 1
_EPSILON = 2.0**-52

# Probability 2**-12 gate, then 0x1000 / (2**52 + 1), gives 1.0 a share of
# exactly one 52-bit step.
_CC_GATE = 0xFFF0000000000000
_CC_SPAN = (1 << 52) + 1
_CC_ONE = 0x1000


def double_co(engine: BitEngine) -> float:
    """Uniform double in ``[0, 1)``."""
    return (engine.next64() & _MANTISSA_MASK) * _EPSILON


def double_oc(engine: BitEngine) -> float:
    """Uniform double in ``(0, 1]``."""
    return 1.0 - (engine.next64() & _MANTISSA_MASK) * _EPSILON


def double_oo(engine: BitEngine) -> float:
    """Uniform double in ``(0, 1)``."""
    n = engine.next64()
    while n <= 0xFFF:
        n = engine.next64()
    return (n >> 12) * _EPSILON


def double_cc(engine: BitEngine) -> float:
    """Uniform double in ``[0, 1]``."""
    n = engine.next64()
    if n >= _CC_GATE and below(engine, _CC_SPAN) < _CC_ONE:
        return 1.0
    return (n & _MANTISSA_MASK) * _EPSILON


def below(engine: BitEngine, upper: int) -> int:
    """Uniform integer in ``[0, upper)`` by masked rejection.

    Raises:
        ArgumentOutOfRangeError: If ``upper`` is not in ``[1, 2**64]``.
    """
    if upper < 1 or upper > 1 << 64:
        raise ArgumentOutOfRangeError('upper', 'The upper bound must be in [1, 2**64].', upper)
    mask = (1 << (upper - 1).bit_length()) - 1
    n = engine.next64() & mask
    while n >= upper:
        n = engine.next64() & mask
    return n


def range_co(engine: BitEngine, lower: float, upper: float) -> float:
    """Uniform double in ``[lower, upper)``."""
    return lower + double_co(engine) * (upper - lower)


def range_cc(engine: BitEngine, lower: float, upper: float) -> float:
    """Uniform double in ``[lower, upper]``."""
    return lower + double_cc(engine) * (upper - lower)
