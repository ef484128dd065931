"""Hypothesis strategies and test doubles for property-based testing of klaw-rng."""

from hypothesis import strategies as st
from klaw_rng.types import MASK32, MASK64

# -----------------------------------------------------------------------------
# Words and seeds
# -----------------------------------------------------------------------------

words32 = st.integers(min_value=0, max_value=MASK32)
words64 = st.integers(min_value=0, max_value=MASK64)

# Engine states that are never all zero
xorshift_states = st.tuples(words32, words32, words32, words32).filter(any)
xoroshiro_states = st.tuples(words64, words64).filter(any)

seed_ints = st.integers(min_value=-(1 << 63), max_value=MASK64)
seed_strings = st.text(min_size=1, max_size=64)
seed_bytes = st.binary(min_size=1, max_size=128)
seed_floats = st.floats(allow_nan=False)
seed_materials = st.one_of(seed_ints, seed_strings, seed_bytes, seed_floats)

# -----------------------------------------------------------------------------
# Distribution shapes
# -----------------------------------------------------------------------------

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
widths = st.floats(min_value=1e-3, max_value=1e3, allow_nan=False, allow_infinity=False)
heights = st.one_of(st.just(0.0), st.floats(min_value=1e-3, max_value=1e3))


@st.composite
def increasing_xs(draw: st.DrawFn, min_size: int = 2, max_size: int = 8) -> list[float]:
    """Strictly increasing boundaries built from a start and positive widths."""
    start = draw(finite)
    steps = draw(st.lists(widths, min_size=min_size - 1, max_size=max_size - 1))
    xs = [start]
    for step in steps:
        xs.append(xs[-1] + step)
    return xs


@st.composite
def piecewise_shapes(draw: st.DrawFn) -> tuple[list[float], list[float]]:
    """Boundaries plus one non-negative height per boundary, with some positive height."""
    xs = draw(increasing_xs())
    ys = draw(st.lists(heights, min_size=len(xs), max_size=len(xs)))
    if not any(y > 0.0 for y in ys[:-1]):
        ys[0] = 1.0
    return xs, ys


# -----------------------------------------------------------------------------
# Test doubles
# -----------------------------------------------------------------------------


class ReplayEngine:
    """BitEngine that replays fixed 64-bit values, cycling when exhausted."""

    def __init__(self, values: list[int]) -> None:
        self.values = values
        self.index = 0

    def next64(self) -> int:
        value = self.values[self.index % len(self.values)]
        self.index += 1
        return value

    def next32(self) -> int:
        return self.next64() & MASK32


class ZeroEngine:
    """BitEngine that only ever produces zero bits."""

    def next32(self) -> int:
        return 0

    def next64(self) -> int:
        return 0
