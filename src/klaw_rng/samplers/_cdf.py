"""Integer CDF tables for picking a segment with one raw draw.

A table maps a uniformly drawn 32- or 64-bit integer straight to a segment
index by binary search, so the piecewise samplers spend a single engine call
on segment selection and never touch floating point for it.

The table never decreases, and its last entry is the maximum of its integer
width, so every possible draw lands on exactly one index.
"""

from __future__ import annotations

import bisect
import math
from typing import TYPE_CHECKING

import msgspec

from klaw_rng.types import MASK32, MASK64

if TYPE_CHECKING:
    from collections.abc import Sequence

    from klaw_rng.engine import BitEngine

__all__ = ['CdfTable', 'table_bits']

# Largest double below 2**64 with headroom, so floor(p * scale) never wraps.
_SCALE64 = float(0xFFFFFFFFFFFFF800)
_SCALE32 = float(1 << 32)


def table_bits(engine: object) -> int:
    """Native table width for ``engine``: 32 for 32-bit engines, otherwise 64."""
    return 32 if getattr(engine, 'step_bit_count', 64) == 32 else 64


class CdfTable(msgspec.Struct, frozen=True, gc=False):
    """Cumulative integer thresholds, one per segment.

    Attributes:
        cdf: Exclusive upper thresholds; segment ``i`` owns draws in
            ``[cdf[i-1], cdf[i])``.
        bits: Width of the draws the table expects (32 or 64).
    """

    cdf: tuple[int, ...]
    bits: int = 64

    @classmethod
    def build(cls, weights: Sequence[float], bits: int = 64) -> CdfTable:
        """Build a table from non-negative weights with a positive sum."""
        total = 0.0
        for weight in weights:
            total += weight
        if bits == 32:
            return cls(_build32(weights, total), 32)
        return cls(_build64(weights, total), 64)

    @property
    def max_value(self) -> int:
        """Largest possible draw, always equal to the last threshold."""
        return MASK32 if self.bits == 32 else MASK64

    def __len__(self) -> int:
        return len(self.cdf)

    def search(self, n: int) -> int:
        """Smallest index whose threshold is above ``n``, clamped to the last index."""
        return min(bisect.bisect_right(self.cdf, n), len(self.cdf) - 1)

    def draw(self, engine: BitEngine) -> int:
        """Pick a segment index with one draw of the table's width."""
        n = engine.next32() if self.bits == 32 else engine.next64()
        return self.search(n)


def _build64(weights: Sequence[float], total: float) -> tuple[int, ...]:
    cdf = []
    prefix = 0.0
    for weight in weights:
        prefix += weight
        cdf.append(math.floor(prefix / total * _SCALE64))

    # Spread the headroom left by the scale over the segments by weight. The
    # running sum keeps the table non-decreasing.
    remainder = MASK64 - cdf[-1]
    remaining_weight = prefix
    added = 0
    for i, weight in enumerate(weights[:-1]):
        extra = min(round(weight / remaining_weight * remainder), remainder) if remaining_weight > 0.0 else 0
        remainder -= extra
        remaining_weight -= weight
        added += extra
        cdf[i] = min(cdf[i] + added, MASK64)
    cdf[-1] = MASK64
    return tuple(cdf)


def _build32(weights: Sequence[float], total: float) -> tuple[int, ...]:
    # Thresholds are relative to the total, so tiny weights keep their ratios.
    # A full prefix maps to 2**32 and is clamped onto the last threshold.
    cdf = []
    prefix = 0.0
    for weight in weights:
        prefix += weight
        cdf.append(min(math.floor(prefix / total * _SCALE32), MASK32))
    cdf[-1] = MASK32
    return tuple(cdf)
