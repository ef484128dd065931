"""Concrete engines and the registry that maps ``EngineKind`` to them."""

from __future__ import annotations

from typing import TYPE_CHECKING

from klaw_rng._config import EngineKind, get_config, is_initialized
from klaw_rng.engines.splitmix64 import SplitMix64
from klaw_rng.engines.xoroshiro128plus import XoroShiro128Plus
from klaw_rng.engines.xorshift_add import XorShiftAdd

if TYPE_CHECKING:
    from klaw_rng.engine import Engine
    from klaw_rng.seed import SeedMaterial

__all__ = [
    'ENGINE_TYPES',
    'SplitMix64',
    'XoroShiro128Plus',
    'XorShiftAdd',
    'create_engine',
    'engine_type',
]

ENGINE_TYPES: dict[EngineKind, type[SplitMix64 | XorShiftAdd | XoroShiro128Plus]] = {
    EngineKind.SPLITMIX64: SplitMix64,
    EngineKind.XORSHIFT_ADD: XorShiftAdd,
    EngineKind.XOROSHIRO128PLUS: XoroShiro128Plus,
}


def engine_type(kind: EngineKind | str) -> type[SplitMix64 | XorShiftAdd | XoroShiro128Plus]:
    """Look up an engine class by kind or registry name.

    Raises:
        ValueError: If the name is not registered.
    """
    if isinstance(kind, str):
        kind = EngineKind(kind.lower())
    return ENGINE_TYPES[kind]


def create_engine(kind: EngineKind | str | None = None, seed: SeedMaterial = None) -> Engine:
    """Create a seeded engine.

    Args:
        kind: Engine kind. Defaults to the configured engine, or XorShiftAdd
            before ``init()``.
        seed: Seed material. Defaults to the configured seed, or transient
            entropy when none is configured.

    Example:
        ```python
        engine = create_engine('splitmix64', seed='level-7')
        ```
    """
    if kind is None:
        kind = get_config().engine if is_initialized() else EngineKind.XORSHIFT_ADD
    if seed is None and is_initialized():
        seed = get_config().seed
    return engine_type(kind)(seed)
