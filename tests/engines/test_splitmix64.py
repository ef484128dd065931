"""Tests for the SplitMix64 engine."""

from __future__ import annotations

import pytest
from hypothesis import given
from klaw_rng.engines import SplitMix64
from klaw_rng.engines.splitmix64 import GOLDEN_GAMMA
from klaw_rng.errors import InvalidStateError
from klaw_rng.seed import SeedDiffuser
from klaw_rng.types import MASK64

from tests.strategies import words64


class TestKnownAnswers:
    """Reference outputs from state zero."""

    def test_first_outputs(self) -> None:
        engine = SplitMix64.with_state(0)
        assert [engine.next64() for _ in range(3)] == [
            0xE220A8397B1DCDAF,
            0x6E789E6AA1B965F4,
            0x06C45D188009454F,
        ]

    def test_next32_is_low_half(self) -> None:
        assert SplitMix64.with_state(0).next32() == 0x7B1DCDAF

    def test_next64_pair(self) -> None:
        assert SplitMix64.with_state(0).next64_pair() == (0x7B1DCDAF, 0xE220A839)


class TestState:
    """Tests for state handling."""

    def test_attributes(self) -> None:
        assert SplitMix64.name == 'splitmix64'
        assert SplitMix64.step_bit_count == 64
        assert SplitMix64.skip_ahead_magnitude == 0

    def test_every_state_is_valid(self) -> None:
        engine = SplitMix64.with_state(0)
        engine.restore_state(bytes(8))
        assert engine.state == 0

    def test_save_state_is_big_endian(self) -> None:
        assert SplitMix64.with_state(0x0102030405060708).save_state() == bytes(range(1, 9))

    @given(words64)
    def test_save_restore_round_trip(self, state: int) -> None:
        original = SplitMix64.with_state(state)
        restored = SplitMix64.with_state(0)
        restored.restore_state(original.save_state())
        assert [restored.next64() for _ in range(4)] == [original.next64() for _ in range(4)]

    def test_restore_wrong_length_raises(self) -> None:
        with pytest.raises(InvalidStateError):
            SplitMix64.with_state(0).restore_state(bytes(4))

    def test_step_adds_gamma(self) -> None:
        engine = SplitMix64.with_state(MASK64)
        engine.step()
        assert engine.state == (MASK64 + GOLDEN_GAMMA) & MASK64

    def test_clone_is_independent(self) -> None:
        engine = SplitMix64(1)
        copy = engine.clone()
        engine.next64()
        assert copy != engine

    def test_copy_state_from(self) -> None:
        a = SplitMix64(1)
        b = SplitMix64(2)
        b.copy_state_from(a)
        assert a == b

    def test_repr(self) -> None:
        assert repr(SplitMix64.with_state(0xAB)) == 'SplitMix64 { 0x00000000000000AB }'


class TestSeeding:
    """Tests for seed/merge_seed."""

    def test_seed_takes_one_diffused_word(self) -> None:
        engine = SplitMix64('abc')
        assert engine.state == SeedDiffuser.from_str('abc').next64()

    def test_merge_seed_xors(self) -> None:
        engine = SplitMix64.with_state(0x55)
        engine.merge_seed(9)
        assert engine.state == 0x55 ^ SeedDiffuser.from_int(9).next64()

    def test_determinism(self) -> None:
        a = SplitMix64('determinism')
        b = SplitMix64('determinism')
        assert [a.next64() for _ in range(10_000)] == [b.next64() for _ in range(10_000)]
