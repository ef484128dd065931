"""SplitMix64: a 64-bit Weyl sequence passed through a bijective mixer.

Fast, tiny state, and every 64-bit state is valid. Its main use in practice
is expanding one word of seed into the larger states of other engines.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from klaw_rng.engine import (
    pack_words,
    raise_unsupported,
    skip_ahead_by_step,
    split_next64,
    truncate_next64,
    unpack_words,
)
from klaw_rng.seed import seed_source
from klaw_rng.types import MASK64

if TYPE_CHECKING:
    from klaw_rng.seed import SeedMaterial

__all__ = ['SplitMix64']

GOLDEN_GAMMA = 0x9E3779B97F4A7C15
_MIX1 = 0xBF58476D1CE4E5B9
_MIX2 = 0x94D049BB133111EB


def _mix(z: int) -> int:
    z = ((z ^ (z >> 30)) * _MIX1) & MASK64
    z = ((z ^ (z >> 27)) * _MIX2) & MASK64
    return z ^ (z >> 31)


class SplitMix64:
    """SplitMix64 engine with a single 64-bit word of state.

    Example:
        ```python
        engine = SplitMix64.with_state(0)
        assert engine.next64() == 0xE220A8397B1DCDAF
        ```
    """

    __slots__ = ('_state',)

    name: ClassVar[str] = 'splitmix64'
    step_bit_count: ClassVar[int] = 64
    skip_ahead_magnitude: ClassVar[int] = 0
    skip_back_magnitude: ClassVar[int] = -1

    def __init__(self, seed: SeedMaterial = None) -> None:
        self._state = 0
        self.seed(seed)

    @classmethod
    def with_state(cls, state: int) -> Self:
        """Build an engine directly from its state word."""
        engine = cls.__new__(cls)
        engine._state = state & MASK64
        return engine

    @property
    def state(self) -> int:
        """The raw state word."""
        return self._state

    def clone(self) -> Self:
        """Return an independent engine with identical state."""
        return self.with_state(self._state)

    def copy_state_from(self, other: SplitMix64) -> None:
        """Overwrite this engine's state with ``other``'s."""
        self._state = other._state

    # --- Bits ---

    def next32(self) -> int:
        return truncate_next64(self)

    def next64(self) -> int:
        self._state = (self._state + GOLDEN_GAMMA) & MASK64
        return _mix(self._state)

    def next64_pair(self) -> tuple[int, int]:
        return split_next64(self)

    # --- State ---

    def save_state(self) -> bytes:
        return pack_words((self._state,), 8)

    def restore_state(self, data: bytes) -> None:
        (self._state,) = unpack_words(data, 1, 8, self.name)

    def seed(self, material: SeedMaterial = None) -> None:
        self._state = seed_source(material).next64()

    def merge_seed(self, material: SeedMaterial = None) -> None:
        self._state ^= seed_source(material).next64()

    # --- Movement ---

    def step(self) -> None:
        self._state = (self._state + GOLDEN_GAMMA) & MASK64

    def skip_ahead(self) -> None:
        skip_ahead_by_step(self)

    def skip_back(self) -> None:
        raise_unsupported(self, 'skip_back')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SplitMix64):
            return NotImplemented
        return self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'{type(self).__name__} {{ 0x{self._state:016X} }}'
