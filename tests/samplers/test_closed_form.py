"""Tests for the uniform, triangular and trapezoidal samplers."""

from __future__ import annotations

import pytest
from hypothesis import given
from klaw_rng.errors import ArgumentOutOfRangeError
from klaw_rng.samplers import (
    Sampler,
    TrapezoidalSampler,
    TriangularSampler,
    UniformSampler,
    trapezoidal_sample,
    triangular_sample,
    uniform_sample,
)
from klaw_rng.types import MASK64
from klaw_rng.unit import double_cc

from tests.strategies import ReplayEngine, words64


class TestUniform:
    """Tests for uniform_sample and UniformSampler."""

    @given(words64)
    def test_one_shot_matches_formula(self, n: int) -> None:
        expected = 2.0 + double_cc(ReplayEngine([n, 0])) * 3.0
        assert uniform_sample(ReplayEngine([n, 0]), 2.0, 5.0) == pytest.approx(expected)

    def test_includes_upper_bound(self) -> None:
        assert UniformSampler(ReplayEngine([MASK64, 0]), 2.0, 5.0).next() == 5.0

    @pytest.mark.parametrize(('x0', 'x1'), [(1.0, 1.0), (2.0, 1.0), (0.0, float('nan'))])
    def test_requires_increasing_bounds(self, x0: float, x1: float) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            UniformSampler(ReplayEngine([0]), x0, x1)
        assert exc_info.value.param == 'x1'

    def test_repr(self) -> None:
        assert repr(UniformSampler(ReplayEngine([0]), 0.0, 2.0)) == 'UniformSampler(x0=0.0, x1=2.0)'


class TestTriangular:
    """Tests for triangular_sample and TriangularSampler."""

    def test_histogram_peaks_at_mode(self, splitmix: object) -> None:
        sampler = TriangularSampler(splitmix, 0.0, 3.0, 10.0)  # type: ignore[arg-type]
        counts = [0] * 10
        for _ in range(100_000):
            value = sampler.next()
            assert 0.0 <= value <= 10.0
            counts[int(value)] += 1
        peak = counts.index(max(counts))
        assert peak in (2, 3)
        # Density at the mode is 2/10; the unit bins on either side hold about 0.17 and 0.19.
        assert counts[9] < counts[5] < counts[3]

    @given(words64)
    def test_sampler_matches_one_shot(self, n: int) -> None:
        one_shot = triangular_sample(ReplayEngine([n, 1 << 63]), -1.0, 0.5, 4.0)
        sampler = TriangularSampler(ReplayEngine([n, 1 << 63]), -1.0, 0.5, 4.0)
        assert sampler.next() == pytest.approx(one_shot)

    def test_never_returns_bounds(self) -> None:
        sampler = TriangularSampler(ReplayEngine([0x1000, MASK64]), 0.0, 1.0, 2.0)
        assert 0.0 < sampler.next() < 2.0
        assert 0.0 < sampler.next() < 2.0

    @pytest.mark.parametrize(
        ('x0', 'x1', 'x2', 'param'),
        [(0.0, 0.0, 1.0, 'x1'), (0.0, -1.0, 1.0, 'x1'), (0.0, 1.0, 1.0, 'x2')],
    )
    def test_validation_names_parameter(self, x0: float, x1: float, x2: float, param: str) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            triangular_sample(ReplayEngine([0]), x0, x1, x2)
        assert exc_info.value.param == param


class TestTrapezoidal:
    """Tests for trapezoidal_sample and TrapezoidalSampler."""

    def test_range_and_plateau(self, splitmix: object) -> None:
        sampler = TrapezoidalSampler(splitmix, 0.0, 1.0, 3.0, 4.0)  # type: ignore[arg-type]
        values = [sampler.next() for _ in range(40_000)]
        assert all(0.0 < v < 4.0 for v in values)
        # Plateau [1, 3] holds 2/3 of the mass.
        plateau = sum(1 for v in values if 1.0 <= v <= 3.0) / len(values)
        assert plateau == pytest.approx(2.0 / 3.0, abs=0.02)

    @given(words64)
    def test_sampler_matches_one_shot(self, n: int) -> None:
        one_shot = trapezoidal_sample(ReplayEngine([n, 1 << 63]), 0.0, 2.0, 3.0, 7.0)
        sampler = TrapezoidalSampler(ReplayEngine([n, 1 << 63]), 0.0, 2.0, 3.0, 7.0)
        assert sampler.next() == pytest.approx(one_shot)

    @pytest.mark.parametrize(
        ('xs', 'param'),
        [((0.0, 0.0, 1.0, 2.0), 'x1'), ((0.0, 1.0, 1.0, 2.0), 'x2'), ((0.0, 1.0, 2.0, 2.0), 'x3')],
    )
    def test_validation_names_parameter(self, xs: tuple[float, float, float, float], param: str) -> None:
        with pytest.raises(ArgumentOutOfRangeError) as exc_info:
            TrapezoidalSampler(ReplayEngine([0]), *xs)
        assert exc_info.value.param == param


def test_precomputed_samplers_are_samplers() -> None:
    engine = ReplayEngine([1 << 63])
    assert isinstance(UniformSampler(engine, 0.0, 1.0), Sampler)
    assert isinstance(TriangularSampler(engine, 0.0, 1.0, 2.0), Sampler)
    assert isinstance(TrapezoidalSampler(engine, 0.0, 1.0, 2.0, 3.0), Sampler)
