"""Library configuration: EngineKind enum, RngConfig, and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum

from klaw_rng._logging import configure_logging

__all__ = [
    'DEFAULT_ZIGGURAT_TABLE_SIZE',
    'EngineKind',
    'RngConfig',
    'get_config',
    'init',
    'is_initialized',
    'reset',
]

DEFAULT_ZIGGURAT_TABLE_SIZE = 256


class EngineKind(Enum):
    """Registered random engine implementations."""

    SPLITMIX64 = 'splitmix64'
    XORSHIFT_ADD = 'xorshift_add'
    XOROSHIRO128PLUS = 'xoroshiro128plus'


@dataclass(frozen=True)
class RngConfig:
    """Configuration for klaw-rng.

    Attributes:
        engine: Engine used by ``create_engine()`` when no kind is given.
        seed: Seed material used by ``create_engine()`` when none is given.
            None = transient entropy.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
        ziggurat_table_size: Segment count of the default normal/exponential tables.
    """

    engine: EngineKind = EngineKind.XORSHIFT_ADD
    seed: str | None = None
    log_level: str | None = None
    ziggurat_table_size: int = DEFAULT_ZIGGURAT_TABLE_SIZE


# Global configuration (set by init())
_config: RngConfig | None = None


def _detect_engine() -> EngineKind:
    """Detect the default engine from the KLAW_RNG_ENGINE environment variable."""
    env_engine = os.environ.get('KLAW_RNG_ENGINE', '').strip().lower()
    if not env_engine:
        return EngineKind.XORSHIFT_ADD
    try:
        return EngineKind(env_engine)
    except ValueError:
        logging.warning("Unknown KLAW_RNG_ENGINE value '%s', defaulting to xorshift_add", env_engine)
        return EngineKind.XORSHIFT_ADD


def _detect_seed() -> str | None:
    """Detect a fixed seed from the KLAW_RNG_SEED environment variable."""
    return os.environ.get('KLAW_RNG_SEED') or None


def _detect_ziggurat_table_size() -> int:
    """Detect the default ziggurat table size from KLAW_RNG_ZIGGURAT_SIZE."""
    env_size = os.environ.get('KLAW_RNG_ZIGGURAT_SIZE', '').strip()
    if not env_size:
        return DEFAULT_ZIGGURAT_TABLE_SIZE
    try:
        return _validate_table_size(int(env_size))
    except ValueError:
        logging.warning(
            "Invalid KLAW_RNG_ZIGGURAT_SIZE value '%s', defaulting to %d", env_size, DEFAULT_ZIGGURAT_TABLE_SIZE
        )
        return DEFAULT_ZIGGURAT_TABLE_SIZE


def _validate_table_size(size: int) -> int:
    """Reject table sizes that are not a power of two in [4, 65536]."""
    if size < 4 or size > 65_536 or size & (size - 1):
        msg = f'Ziggurat table size must be a power of two between 4 and 65536, got {size}'
        raise ValueError(msg)
    return size


def init(
    engine: EngineKind | str | None = None,
    seed: str | None = None,
    log_level: str | None = None,
    ziggurat_table_size: int | None = None,
) -> RngConfig:
    """Initialize klaw-rng with the specified configuration.

    Args:
        engine: Default engine kind. Detected from KLAW_RNG_ENGINE if None.
            Can be EngineKind enum or string ("splitmix64", "xorshift_add", ...).
        seed: Default seed material. Detected from KLAW_RNG_SEED if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.
        ziggurat_table_size: Default ziggurat table size. Detected from
            KLAW_RNG_ZIGGURAT_SIZE if None.

    Returns:
        The RngConfig that was set.

    Raises:
        ValueError: If the engine name or table size is invalid.

    Example:
        ```python
        from klaw_rng import init, create_engine

        # Reproducible runs across the whole process
        init(engine='splitmix64', seed='experiment-42', log_level='DEBUG')
        engine = create_engine()
        ```
    """
    global _config  # noqa: PLW0603

    if engine is None:
        resolved_engine = _detect_engine()
    elif isinstance(engine, str):
        resolved_engine = EngineKind(engine.lower())
    else:
        resolved_engine = engine

    if ziggurat_table_size is None:
        resolved_size = _detect_ziggurat_table_size()
    else:
        resolved_size = _validate_table_size(ziggurat_table_size)

    _config = RngConfig(
        engine=resolved_engine,
        seed=seed if seed is not None else _detect_seed(),
        log_level=log_level,
        ziggurat_table_size=resolved_size,
    )

    if log_level is not None:
        configure_logging(log_level)

    return _config


def get_config() -> RngConfig:
    """Get the current configuration.

    Returns:
        The current RngConfig.

    Raises:
        RuntimeError: If init() has not been called.
    """
    if _config is None:
        msg = 'klaw-rng not initialized. Call klaw_rng.init() first.'
        raise RuntimeError(msg)
    return _config


def is_initialized() -> bool:
    """Return True once init() has been called."""
    return _config is not None


def reset() -> None:
    """Forget the current configuration (mainly for tests)."""
    global _config  # noqa: PLW0603
    _config = None
