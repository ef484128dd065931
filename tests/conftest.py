"""Pytest configuration and shared fixtures for klaw-rng tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from klaw_rng._config import reset
from klaw_rng._logging import clear_log_hooks
from klaw_rng.engines import SplitMix64, XoroShiro128Plus, XorShiftAdd

if TYPE_CHECKING:
    from collections.abc import Generator

    from klaw_rng.engine import Engine

TEST_SEED = 'klaw-rng-tests'


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None]:
    """Every test starts and ends without a global configuration."""
    reset()
    yield
    reset()


@pytest.fixture
def cleanup_hooks() -> Generator[None]:
    """Clear log hooks before and after the test."""
    clear_log_hooks()
    yield
    clear_log_hooks()


@pytest.fixture(params=[SplitMix64, XorShiftAdd, XoroShiro128Plus], ids=lambda cls: cls.name)
def engine_cls(request: pytest.FixtureRequest) -> type[SplitMix64 | XorShiftAdd | XoroShiro128Plus]:
    """Each registered engine class in turn."""
    return request.param


@pytest.fixture
def engine(engine_cls: type[SplitMix64 | XorShiftAdd | XoroShiro128Plus]) -> Engine:
    """Each registered engine, seeded from a fixed string."""
    return engine_cls(TEST_SEED)


@pytest.fixture
def splitmix() -> SplitMix64:
    """A deterministic 64-bit engine."""
    return SplitMix64(TEST_SEED)


@pytest.fixture
def xorshift() -> XorShiftAdd:
    """A deterministic 32-bit engine."""
    return XorShiftAdd(TEST_SEED)
