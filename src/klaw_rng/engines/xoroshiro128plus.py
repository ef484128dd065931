"""XoroShiro128+: xor/rotate/shift/rotate over two 64-bit words.

Native 64-bit output with a period of ``2**128 - 1``. As with every linear
xorshift family member, the all-zero state is forbidden. The lowest output
bits are weaker than the rest; the unit draws only use the upper 52.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from klaw_rng._logging import get_logger
from klaw_rng.engine import jump, pack_words, raise_unsupported, split_next64, truncate_next64, unpack_words
from klaw_rng.errors import InvalidArgumentError, InvalidStateError
from klaw_rng.seed import seed_source
from klaw_rng.types import MASK64

if TYPE_CHECKING:
    from klaw_rng.seed import SeedMaterial

__all__ = ['XoroShiro128Plus']

_logger = get_logger(__name__)

type State = tuple[int, int]

SEED_ATTEMPTS = 4

# x**(2**64) mod the characteristic polynomial, low word first.
_JUMP_MASKS = (0xBEAC0467EBA5FACB, 0xD86B048B86AA9922)


def _rotl(x: int, k: int) -> int:
    return ((x << k) | (x >> (64 - k))) & MASK64


def _advance(state: tuple[int, ...]) -> State:
    x, y = state
    y ^= x
    return _rotl(x, 55) ^ y ^ ((y << 14) & MASK64), _rotl(y, 36)


class XoroShiro128Plus:
    """XoroShiro128+ engine with two 64-bit words of state."""

    __slots__ = ('_state',)

    name: ClassVar[str] = 'xoroshiro128plus'
    step_bit_count: ClassVar[int] = 64
    skip_ahead_magnitude: ClassVar[int] = 64
    skip_back_magnitude: ClassVar[int] = -1

    def __init__(self, seed: SeedMaterial = None) -> None:
        self._state: State = (0, 1)
        self.seed(seed)

    @classmethod
    def with_state(cls, s0: int, s1: int) -> Self:
        """Build an engine directly from its two state words.

        Raises:
            InvalidStateError: If both words are zero.
        """
        engine = cls.__new__(cls)
        engine._state = (0, 1)
        engine._set_state((s0 & MASK64, s1 & MASK64))
        return engine

    def _set_state(self, state: State) -> None:
        if not any(state):
            raise InvalidStateError(self.name, 'the all-zero state is not allowed')
        self._state = state

    @property
    def state(self) -> State:
        """The raw state words."""
        return self._state

    def clone(self) -> Self:
        """Return an independent engine with identical state."""
        return self.with_state(*self._state)

    def copy_state_from(self, other: XoroShiro128Plus) -> None:
        """Overwrite this engine's state with ``other``'s."""
        self._state = other._state

    # --- Bits ---

    def next32(self) -> int:
        return truncate_next64(self)

    def next64(self) -> int:
        state = self._state
        self._state = _advance(state)
        return (state[0] + state[1]) & MASK64

    def next64_pair(self) -> tuple[int, int]:
        return split_next64(self)

    # --- State ---

    def save_state(self) -> bytes:
        return pack_words(self._state, 8)

    def restore_state(self, data: bytes) -> None:
        self._set_state(unpack_words(data, 2, 8, self.name))  # type: ignore[arg-type]

    def seed(self, material: SeedMaterial = None) -> None:
        """Replace the state with two words drawn from ``material``.

        Raises:
            InvalidArgumentError: If four consecutive candidates were all zero.
        """
        self._apply_seed(material, (0, 0))

    def merge_seed(self, material: SeedMaterial = None) -> None:
        """XOR two words drawn from ``material`` into the current state."""
        self._apply_seed(material, self._state)

    def _apply_seed(self, material: SeedMaterial, base: State) -> None:
        source = seed_source(material)
        for attempt in range(SEED_ATTEMPTS):
            candidate = (base[0] ^ source.next64(), base[1] ^ source.next64())
            if any(candidate):
                self._state = candidate
                return
            _logger.warning('seed_attempt_all_zero', engine=self.name, attempt=attempt + 1)
        msg = 'The seed source was unable to produce a non-zero state.'
        raise InvalidArgumentError('seed', msg)

    # --- Movement ---

    def step(self) -> None:
        self._state = _advance(self._state)

    def skip_ahead(self) -> None:
        """Advance by exactly ``2**64`` steps."""
        self._state = jump(self._state, _advance, _JUMP_MASKS, 64)  # type: ignore[assignment]

    def skip_back(self) -> None:
        raise_unsupported(self, 'skip_back')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XoroShiro128Plus):
            return NotImplemented
        return self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'{type(self).__name__} {{ 0x{self._state[0]:016X}, 0x{self._state[1]:016X} }}'
