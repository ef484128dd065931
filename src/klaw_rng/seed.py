"""Seed diffusion: turn arbitrary seed material into well-mixed bits.

A ``SeedDiffuser`` owns a byte buffer built from the caller's material and
produces values by running FNV-1a over the whole buffer on every call. Each
call starts at a rotating offset and first mixes in an evolving call
counter, so consecutive calls against the same short buffer still diverge.

Engines never persist a diffuser; one is built per seeding operation and
consumed by the engine's ``seed()``/``merge_seed()``.

Usage:
    >>> from klaw_rng.seed import SeedDiffuser
    >>> diffuser = SeedDiffuser.from_str('level-7')
    >>> first = diffuser.next64()
    >>> SeedDiffuser.from_str('level-7').next64() == first
    True
"""

from __future__ import annotations

import os
import struct
import threading
import time
from collections.abc import Sequence
from typing import Self

import psutil

from klaw_rng._logging import get_logger
from klaw_rng.engine import BitEngine, split_next64
from klaw_rng.errors import ArgumentOutOfRangeError, InvalidArgumentError
from klaw_rng.types import MASK32, MASK64

__all__ = [
    'SEED_COUNTER_INCREMENT',
    'EntropyCounter',
    'SeedDiffuser',
    'SeedMaterial',
    'offset_increment',
    'process_entropy_counter',
    'seed_source',
]

_logger = get_logger(__name__)

type SeedMaterial = (
    int | float | str | bytes | bytearray | memoryview | Sequence[int] | Sequence[float] | BitEngine | None
)

# Signed form of the prime 2783452723.
SEED_COUNTER_INCREMENT = -1511514573

_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47)

_FNV32_BASIS = 2166136261
_FNV32_PRIME = 16777619
_FNV64_BASIS = 14695981039346656037
_FNV64_PRIME = 1099511628211

# Wall clock in 100 ns ticks.
_NS_PER_TICK = 100


def _wrap_i32(value: int) -> int:
    value &= MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def offset_increment(length: int) -> int:
    """Stride by which the read offset advances after each produced value.

    Zero for a one-byte buffer. Otherwise the largest prime below the
    square root of the length that does not divide it, or 1 if none does.
    """
    if length == 1:
        return 0
    increment = 1
    for prime in _PRIMES:
        if prime * prime >= length:
            break
        if length % prime != 0:
            increment = prime
    return increment


class EntropyCounter:
    """Process-scoped counter mixed into every transient-entropy seed.

    Two diffusers created in the same clock tick by the same process still
    see different counter values, so they do not collide. The counter starts
    at zero and advances atomically by ``SEED_COUNTER_INCREMENT``, wrapping
    as a signed 32-bit integer.
    """

    __slots__ = ('_increment', '_lock', '_value')

    def __init__(self, value: int = 0, increment: int = SEED_COUNTER_INCREMENT) -> None:
        self._value = _wrap_i32(value)
        self._increment = increment
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        """Current counter value."""
        return self._value

    def advance(self) -> int:
        """Atomically advance the counter and return the new value."""
        with self._lock:
            self._value = _wrap_i32(self._value + self._increment)
            return self._value


process_entropy_counter = EntropyCounter()
"""The default counter shared by every ``SeedDiffuser.from_entropy()`` call."""


def _int_width(value: int) -> int:
    if -(1 << 31) <= value <= MASK32:
        return 4
    if -(1 << 63) <= value <= MASK64:
        return 8
    raise ArgumentOutOfRangeError('seed', 'Integer seeds must fit in 64 bits.', value)


def _encode_int(value: int, width: int) -> bytes:
    if value < 0:
        return value.to_bytes(width, 'little', signed=True)
    return value.to_bytes(width, 'little')


class SeedDiffuser:
    """A ``BitEngine`` that hashes seed material into a stream of values.

    Construct through the ``from_*`` class methods; the constructor takes an
    already encoded, non-empty buffer.
    """

    __slots__ = ('_call_seed', '_data', '_increment', '_offset')

    def __init__(self, data: bytes) -> None:
        if not data:
            raise InvalidArgumentError('seed', 'Seed data must not be empty.')
        self._data = bytes(data)
        self._offset = 0
        self._increment = offset_increment(len(self._data))
        self._call_seed = 0

    # --- Construction ---

    @classmethod
    def from_entropy(cls, counter: EntropyCounter | None = None) -> Self:
        """Build from wall clock, process identity, CPU usage and a counter.

        Args:
            counter: Counter to advance; defaults to ``process_entropy_counter``.
        """
        counter = counter if counter is not None else process_entropy_counter
        cpu = psutil.Process(os.getpid()).cpu_times()
        sequence = counter.advance()
        data = struct.pack(
            '<qIIqqi',
            time.time_ns() // _NS_PER_TICK,
            (time.monotonic_ns() // 1_000_000) & MASK32,
            os.getpid() & MASK32,
            int(cpu.user * 1e7),
            int(cpu.system * 1e7),
            sequence,
        )
        _logger.debug('seed_from_entropy', counter=sequence)
        return cls(data)

    @classmethod
    def from_int(cls, value: int, width: int | None = None) -> Self:
        """Build from one integer, little-endian.

        Args:
            value: Any int representable as a signed or unsigned 64-bit value.
            width: 4 or 8 bytes. By default 4 when the value fits 32 bits.
        """
        if width is None:
            width = _int_width(value)
        elif width not in (4, 8):
            raise ArgumentOutOfRangeError('width', 'Integer width must be 4 or 8 bytes.', width)
        elif _int_width(value) > width:
            raise ArgumentOutOfRangeError('seed', f'Integer seed does not fit in {width} bytes.', value)
        return cls(_encode_int(value, width))

    @classmethod
    def from_float(cls, value: float, width: int = 8) -> Self:
        """Build from the IEEE-754 bytes of one float (8 = double, 4 = single)."""
        if width not in (4, 8):
            raise ArgumentOutOfRangeError('width', 'Float width must be 4 or 8 bytes.', width)
        return cls(struct.pack('<d' if width == 8 else '<f', value))

    @classmethod
    def from_sequence(cls, values: Sequence[int] | Sequence[float]) -> Self:
        """Build from a sequence of ints (common width) or floats (doubles).

        A sequence holding any float is packed entirely as doubles.
        """
        if len(values) == 0:
            raise InvalidArgumentError('seed', 'Seed sequence must not be empty.')
        if not all(isinstance(v, int | float) for v in values):
            raise InvalidArgumentError('seed', 'Seed sequences must hold only ints or floats.')
        if any(isinstance(v, float) for v in values):
            return cls(struct.pack(f'<{len(values)}d', *values))
        width = max(_int_width(v) for v in values)
        return cls(b''.join(_encode_int(v, width) for v in values))

    @classmethod
    def from_str(cls, text: str) -> Self:
        """Build from the UTF-8 encoding of a non-empty string."""
        if not text:
            raise InvalidArgumentError('seed', 'Seed string must not be empty.')
        return cls(text.encode('utf-8'))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> Self:
        """Build from raw bytes."""
        return cls(bytes(data))

    @classmethod
    def from_material(cls, material: SeedMaterial) -> Self:
        """Dispatch on the type of ``material``; None means transient entropy."""
        match material:
            case None:
                return cls.from_entropy()
            case bool() | int():
                return cls.from_int(int(material))
            case float():
                return cls.from_float(material)
            case str():
                return cls.from_str(material)
            case bytes() | bytearray() | memoryview():
                return cls.from_bytes(material)
            case Sequence():
                return cls.from_sequence(material)
        msg = f'Unsupported seed material of type {type(material).__name__}.'
        raise InvalidArgumentError('seed', msg)

    # --- BitEngine ---

    def _advance_call_seed(self) -> int:
        call_seed = self._call_seed
        self._call_seed = _wrap_i32(call_seed + SEED_COUNTER_INCREMENT)
        return call_seed

    def _advance_offset(self) -> int:
        offset = self._offset
        self._offset = (offset + self._increment) % len(self._data)
        return offset

    def next32(self) -> int:
        """Return the next 32-bit FNV-1a value."""
        h = ((_FNV32_BASIS ^ (self._advance_call_seed() & MASK32)) * _FNV32_PRIME) & MASK32
        offset = self._advance_offset()
        data = self._data
        for byte in data[offset:]:
            h = ((h ^ byte) * _FNV32_PRIME) & MASK32
        for byte in data[:offset]:
            h = ((h ^ byte) * _FNV32_PRIME) & MASK32
        return h

    def next64(self) -> int:
        """Return the next 64-bit FNV-1a value."""
        h = ((_FNV64_BASIS ^ (self._advance_call_seed() & MASK64)) * _FNV64_PRIME) & MASK64
        offset = self._advance_offset()
        data = self._data
        for byte in data[offset:]:
            h = ((h ^ byte) * _FNV64_PRIME) & MASK64
        for byte in data[:offset]:
            h = ((h ^ byte) * _FNV64_PRIME) & MASK64
        return h

    def next64_pair(self) -> tuple[int, int]:
        """Return one ``next64`` value as ``(lower, upper)``."""
        return split_next64(self)

    # --- Introspection ---

    @property
    def data(self) -> bytes:
        """The encoded seed buffer."""
        return self._data

    @property
    def offset(self) -> int:
        """Current read offset into the buffer."""
        return self._offset

    @property
    def increment(self) -> int:
        """Offset stride applied after every produced value."""
        return self._increment

    @property
    def call_seed(self) -> int:
        """Current signed 32-bit call counter."""
        return self._call_seed

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SeedDiffuser):
            return NotImplemented
        return (
            self._offset == other._offset
            and self._increment == other._increment
            and self._call_seed == other._call_seed
            and self._data == other._data
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f'SeedDiffuser(len={len(self._data)}, offset={self._offset}, call_seed={self._call_seed})'


def seed_source(material: SeedMaterial) -> BitEngine:
    """Resolve seed material to a bit source.

    A ``BitEngine`` is used as is; anything else is wrapped in a
    ``SeedDiffuser`` (None meaning transient entropy).
    """
    if isinstance(material, BitEngine):
        return material
    return SeedDiffuser.from_material(material)
