"""Engine protocols and the default behaviours engines opt into.

``BitEngine`` is the minimal capability: 32 or 64 random bits on demand.
``Engine`` extends it with state persistence, seeding, stepping and the
optional large jumps through the period.

Neither protocol carries implementation. The default behaviours are plain
functions (``truncate_next64``, ``step_by_next64``, ...) that a concrete
engine calls from its own methods when it has nothing faster, so engines
compose the pieces they need instead of inheriting a base class.

Aliasing contract:
    Engines are single-owner mutable objects. Samplers built from an engine
    keep a reference to it, not a copy, and every draw through any of them
    advances the same state. Sharing one engine between threads requires
    external synchronization.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Protocol, runtime_checkable

from klaw_rng.errors import InvalidStateError, UnsupportedOperationError
from klaw_rng.types import MASK32

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from klaw_rng.seed import SeedMaterial

__all__ = [
    'BitEngine',
    'Engine',
    'engine_name',
    'jump',
    'pack_words',
    'raise_unsupported',
    'skip_ahead_by_step',
    'split_next64',
    'step_by_next64',
    'truncate_next64',
    'unpack_words',
]


@runtime_checkable
class BitEngine(Protocol):
    """Anything that can produce uniformly distributed bits.

    Engines, seed diffusers and test doubles all satisfy this protocol; it
    is the only thing samplers and seeding logic require.
    """

    def next32(self) -> int:
        """Return 32 random bits as an int in ``[0, 2**32)``."""
        ...

    def next64(self) -> int:
        """Return 64 random bits as an int in ``[0, 2**64)``."""
        ...


@runtime_checkable
class Engine(BitEngine, Protocol):
    """A seedable, persistable bit engine.

    Attributes:
        name: Registry name, used in snapshots and error messages.
        step_bit_count: Native bits produced by one internal step (32 or 64).
            Piecewise samplers size their CDF tables from it.
        skip_ahead_magnitude: Guaranteed minimum log2 distance of one
            ``skip_ahead()``. Zero means it is a single step.
        skip_back_magnitude: Same for ``skip_back()``. Negative means the
            operation raises ``UnsupportedOperationError``.
    """

    name: str
    step_bit_count: int
    skip_ahead_magnitude: int
    skip_back_magnitude: int

    def next64_pair(self) -> tuple[int, int]:
        """Return 64 random bits as ``(lower32, upper32)``."""
        ...

    def save_state(self) -> bytes:
        """Serialize the state, most significant byte first."""
        ...

    def restore_state(self, data: bytes) -> None:
        """Replace the state with one produced by ``save_state()``.

        Raises:
            InvalidStateError: If the length or content is incompatible.
        """
        ...

    def seed(self, material: SeedMaterial = None) -> None:
        """Replace the state with one derived from ``material``."""
        ...

    def merge_seed(self, material: SeedMaterial = None) -> None:
        """Mix state derived from ``material`` into the current state."""
        ...

    def step(self) -> None:
        """Advance one step, discarding the output."""
        ...

    def skip_ahead(self) -> None:
        """Advance by ``2**skip_ahead_magnitude`` or more steps."""
        ...

    def skip_back(self) -> None:
        """Rewind by ``2**skip_back_magnitude`` or more steps."""
        ...


# --- Default behaviours ---


def engine_name(engine: object) -> str:
    """Return the registry name of an engine, falling back to its class name."""
    return getattr(engine, 'name', None) or type(engine).__name__


def truncate_next64(engine: BitEngine) -> int:
    """Default ``next32``: the low half of one ``next64`` draw."""
    return engine.next64() & MASK32


def split_next64(engine: BitEngine) -> tuple[int, int]:
    """Default ``next64_pair``: one ``next64`` draw split into ``(lower, upper)``."""
    n = engine.next64()
    return n & MASK32, n >> 32


def step_by_next64(engine: BitEngine) -> None:
    """Default ``step``: draw and discard 64 bits."""
    engine.next64()


def skip_ahead_by_step(engine: Engine) -> None:
    """Default ``skip_ahead`` for engines without an algebraic jump."""
    engine.step()


def raise_unsupported(engine: object, operation: str) -> NoReturn:
    """Default for operations an engine does not support."""
    raise UnsupportedOperationError(engine_name(engine), operation)


# --- State words ---


def pack_words(words: Iterable[int], width: int) -> bytes:
    """Serialize fixed-width unsigned words, most significant byte first.

    Args:
        words: State words, each already reduced to ``width`` bytes.
        width: Bytes per word (4 or 8).
    """
    return b''.join(word.to_bytes(width, 'big') for word in words)


def unpack_words(data: bytes, count: int, width: int, engine: str = 'engine') -> tuple[int, ...]:
    """Inverse of ``pack_words``.

    Raises:
        InvalidStateError: If ``data`` is not exactly ``count * width`` bytes.
    """
    data = bytes(data)
    if len(data) != count * width:
        raise InvalidStateError(engine, f'expected {count * width} state bytes, got {len(data)}')
    return tuple(int.from_bytes(data[i * width : (i + 1) * width], 'big') for i in range(count))


def jump(
    state: tuple[int, ...],
    advance: Callable[[tuple[int, ...]], tuple[int, ...]],
    masks: Sequence[int],
    mask_bits: int,
) -> tuple[int, ...]:
    """Jump a linear recurrence by replaying a precomputed GF(2) polynomial.

    The masks are the binary expansion of ``x**distance`` reduced modulo the
    recurrence's characteristic polynomial. Each set bit contributes the
    state at that point of the replay; the XOR of the contributions is the
    state ``distance`` steps ahead.

    Args:
        state: Current state words.
        advance: Pure single-step function mapping state to next state.
        masks: Polynomial coefficients, consumed least significant bit first.
        mask_bits: Number of coefficient bits held by each mask.

    Returns:
        The jumped state words.
    """
    accumulator = [0] * len(state)
    for mask in masks:
        for bit in range(mask_bits):
            if (mask >> bit) & 1:
                for i, word in enumerate(state):
                    accumulator[i] ^= word
            state = advance(state)
    return tuple(accumulator)
