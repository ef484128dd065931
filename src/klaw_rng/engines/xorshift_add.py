"""XorShift-Add: Marsaglia's 128-bit xorshift with an additive output.

Four 32-bit words of state, a native 32-bit output, and a period of
``2**128 - 1``. The all-zero state is a fixed point of the recurrence and is
never allowed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Self

from klaw_rng._logging import get_logger
from klaw_rng.engine import jump, pack_words, raise_unsupported, unpack_words
from klaw_rng.errors import InvalidArgumentError, InvalidStateError
from klaw_rng.seed import seed_source
from klaw_rng.types import MASK32

if TYPE_CHECKING:
    from klaw_rng.engine import BitEngine
    from klaw_rng.seed import SeedMaterial

__all__ = ['XorShiftAdd']

_logger = get_logger(__name__)

type State = tuple[int, int, int, int]

SEED_ATTEMPTS = 4

# x**(3**41) mod the characteristic polynomial, low word first.
_SKIP_AHEAD_MASKS = (0x2340BA2A, 0xD36FBF89, 0xDD20910C, 0x7FCC01E3)


def _advance(state: tuple[int, ...]) -> State:
    s0, s1, s2, s3 = state
    t = s0
    t ^= (t << 15) & MASK32
    t ^= t >> 18
    t ^= (s3 << 11) & MASK32
    return s1, s2, s3, t


def _draw_state(source: BitEngine, base: State) -> State | None:
    """Draw candidate states XORed onto ``base``; None if all were zero."""
    for attempt in range(SEED_ATTEMPTS):
        candidate = tuple(word ^ source.next32() for word in base)
        if any(candidate):
            return candidate  # type: ignore[return-value]
        _logger.warning('seed_attempt_all_zero', engine=XorShiftAdd.name, attempt=attempt + 1)
    return None


class XorShiftAdd:
    """XorShift-Add engine with four 32-bit words of state.

    Each 64-bit draw is exactly two 32-bit draws, lower half first, so mixing
    ``next32()`` and ``next64()`` never skips output.

    Example:
        ```python
        engine = XorShiftAdd.with_state(0, 0, 0, 1)
        assert [engine.next32() for _ in range(3)] == [1, 2049, 4196352]
        ```
    """

    __slots__ = ('_state',)

    name: ClassVar[str] = 'xorshift_add'
    step_bit_count: ClassVar[int] = 32
    # Exactly 3**41 steps.
    skip_ahead_magnitude: ClassVar[int] = 65
    skip_back_magnitude: ClassVar[int] = -1

    def __init__(self, seed: SeedMaterial = None) -> None:
        self._state: State = (0, 0, 0, 1)
        self.seed(seed)

    @classmethod
    def with_state(cls, s0: int, s1: int, s2: int, s3: int) -> Self:
        """Build an engine directly from its four state words.

        Raises:
            InvalidStateError: If every word is zero.
        """
        engine = cls.__new__(cls)
        engine._state = (0, 0, 0, 1)
        engine._set_state((s0 & MASK32, s1 & MASK32, s2 & MASK32, s3 & MASK32))
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

    def copy_state_from(self, other: XorShiftAdd) -> None:
        """Overwrite this engine's state with ``other``'s."""
        self._state = other._state

    # --- Bits ---

    def next32(self) -> int:
        state = self._state
        self._state = _advance(state)
        return (state[2] + state[3]) & MASK32

    def next64(self) -> int:
        s0, s1, s2, s3 = self._state
        t = s0
        t ^= (t << 15) & MASK32
        t ^= t >> 18
        t ^= (s3 << 11) & MASK32
        s = s1
        s ^= (s << 15) & MASK32
        s ^= s >> 18
        s ^= (t << 11) & MASK32
        self._state = (s2, s3, t, s)
        return ((s2 + s3) & MASK32) | (((s3 + t) & MASK32) << 32)

    def next64_pair(self) -> tuple[int, int]:
        return self.next32(), self.next32()

    # --- State ---

    def save_state(self) -> bytes:
        return pack_words(self._state, 4)

    def restore_state(self, data: bytes) -> None:
        self._set_state(unpack_words(data, 4, 4, self.name))  # type: ignore[arg-type]

    def seed(self, material: SeedMaterial = None) -> None:
        """Replace the state with four words drawn from ``material``.

        Up to four candidate states are drawn; the first that is not all zero
        wins.

        Raises:
            InvalidArgumentError: If every candidate was all zero.
        """
        self._apply_seed(material, (0, 0, 0, 0))

    def merge_seed(self, material: SeedMaterial = None) -> None:
        """XOR four words drawn from ``material`` into the current state."""
        self._apply_seed(material, self._state)

    def _apply_seed(self, material: SeedMaterial, base: State) -> None:
        state = _draw_state(seed_source(material), base)
        if state is None:
            msg = 'The seed source was unable to produce a non-zero state.'
            raise InvalidArgumentError('seed', msg)
        self._state = state

    # --- Movement ---

    def step(self) -> None:
        self._state = _advance(self._state)

    def skip_ahead(self) -> None:
        """Advance by exactly ``3**41`` steps."""
        self._state = jump(self._state, _advance, _SKIP_AHEAD_MASKS, 32)  # type: ignore[assignment]

    def skip_back(self) -> None:
        raise_unsupported(self, 'skip_back')

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XorShiftAdd):
            return NotImplemented
        return self._state == other._state

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        words = ', '.join(f'0x{word:08X}' for word in self._state)
        return f'{type(self).__name__} {{ {words} }}'
