"""Argument checks shared by the samplers.

Every check raises before anything is drawn or stored, and names the
offending parameter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from klaw_rng.errors import ArgumentOutOfRangeError, InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_less(lower: float, upper: float, param: str, message: str) -> None:
    """Raise on ``param`` unless ``lower < upper`` (NaN fails)."""
    if not lower < upper:
        raise ArgumentOutOfRangeError(param, message, upper)


def require_non_negative(value: float, param: str, message: str = 'The domain must be entirely non-negative.') -> None:
    if not value >= 0.0:
        raise ArgumentOutOfRangeError(param, message, value)


def require_positive(value: float, param: str, message: str) -> None:
    if not value > 0.0:
        raise ArgumentOutOfRangeError(param, message, value)


def require_positive_area(area: float, param: str) -> None:
    if not area > 0.0:
        raise InvalidArgumentError(param, 'The total area of the distribution must be positive.')


def require_min_length(values: Sequence[float], length: int, param: str) -> None:
    if len(values) < length:
        raise InvalidArgumentError(param, f'At least {length} values are required, got {len(values)}.')


def require_length(values: Sequence[float], length: int, param: str) -> None:
    if len(values) != length:
        raise InvalidArgumentError(param, f'Expected {length} values, got {len(values)}.')


def require_increasing(x: Sequence[float], param: str = 'x') -> None:
    for x0, x1 in zip(x, x[1:], strict=False):
        require_less(x0, x1, param, 'Each boundary must be greater than the one before it.')
