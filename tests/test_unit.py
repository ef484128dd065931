"""Tests for unit-interval and range draws."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from klaw_rng.errors import ArgumentOutOfRangeError
from klaw_rng.types import MASK64
from klaw_rng.unit import below, double_cc, double_co, double_oc, double_oo, range_cc, range_co

from tests.strategies import ReplayEngine, words64

EPSILON = 2.0**-52


class TestUnitIntervals:
    """Draws stay inside their intervals, including at the extremes."""

    @given(words64)
    def test_co(self, n: int) -> None:
        assert 0.0 <= double_co(ReplayEngine([n])) < 1.0

    @given(words64)
    def test_oc(self, n: int) -> None:
        assert 0.0 < double_oc(ReplayEngine([n])) <= 1.0

    @given(words64)
    def test_oo(self, n: int) -> None:
        assert 0.0 < double_oo(ReplayEngine([n, 1 << 63])) < 1.0

    @given(words64, words64)
    def test_cc(self, n: int, m: int) -> None:
        assert 0.0 <= double_cc(ReplayEngine([n, m, 0])) <= 1.0

    def test_co_extremes(self) -> None:
        assert double_co(ReplayEngine([0])) == 0.0
        assert double_co(ReplayEngine([MASK64])) == 1.0 - EPSILON

    def test_oc_extremes(self) -> None:
        assert double_oc(ReplayEngine([0])) == 1.0
        assert double_oc(ReplayEngine([MASK64])) == EPSILON

    def test_oo_skips_low_draws(self) -> None:
        replay = ReplayEngine([0, 0xFFF, 0x1000])
        assert double_oo(replay) == EPSILON
        assert replay.index == 3

    def test_cc_returns_one_through_gate(self) -> None:
        assert double_cc(ReplayEngine([MASK64, 0])) == 1.0

    def test_cc_gate_miss_falls_back(self) -> None:
        value = double_cc(ReplayEngine([MASK64, 0x1FFF]))
        assert value == 1.0 - EPSILON

    def test_cc_below_gate(self) -> None:
        assert double_cc(ReplayEngine([0])) == 0.0


class TestBelow:
    """Tests for below()."""

    @given(st.integers(min_value=1, max_value=1 << 64), words64)
    def test_in_range(self, upper: int, n: int) -> None:
        assert 0 <= below(ReplayEngine([n, 0]), upper) < upper

    def test_rejects_out_of_range_draws(self) -> None:
        replay = ReplayEngine([7, 6, 5, 2])
        assert below(replay, 5) == 2
        assert replay.index == 4

    @pytest.mark.parametrize('upper', [0, -1, (1 << 64) + 1])
    def test_bad_upper_raises(self, upper: int) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            below(ReplayEngine([0]), upper)
        assert exc_info.value.param == 'upper'


class TestRanges:
    """Tests for range_co/range_cc."""

    @given(words64)
    def test_range_co(self, n: int) -> None:
        assert -2.0 <= range_co(ReplayEngine([n]), -2.0, 3.0) < 3.0

    def test_range_cc_hits_upper(self) -> None:
        assert range_cc(ReplayEngine([MASK64, 0]), -2.0, 3.0) == 3.0

    def test_seeded_mean(self, engine: object) -> None:
        values = [double_co(engine) for _ in range(20_000)]  # type: ignore[arg-type]
        assert abs(sum(values) / len(values) - 0.5) < 0.01
