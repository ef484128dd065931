"""Tests for engine snapshots and their msgspec serialization."""

from __future__ import annotations

import msgspec
import pytest
from klaw_rng.engine import Engine
from klaw_rng.engines import SplitMix64, XorShiftAdd
from klaw_rng.errors import InvalidStateError
from klaw_rng.snapshot import EngineSnapshot, decode, encode, restore, snapshot


class TestSnapshot:
    """Tests for snapshot() and restore()."""

    def test_snapshot_fields(self) -> None:
        saved = snapshot(SplitMix64.with_state(1))
        assert saved == EngineSnapshot(engine='splitmix64', state=(1).to_bytes(8, 'big'))

    def test_restore_continues_stream(self, engine: Engine) -> None:
        for _ in range(17):
            engine.next64()
        restored = restore(snapshot(engine))
        assert type(restored) is type(engine)
        assert [restored.next64() for _ in range(100)] == [engine.next64() for _ in range(100)]

    def test_restore_is_independent(self) -> None:
        engine = XorShiftAdd(5)
        restored = restore(snapshot(engine))
        restored.next32()
        assert restored != engine

    def test_unknown_engine_raises(self) -> None:
        with pytest.raises(InvalidStateError, match='unknown engine'):
            restore(EngineSnapshot(engine='mt19937', state=bytes(8)))

    def test_bad_state_raises(self) -> None:
        with pytest.raises(InvalidStateError):
            restore(EngineSnapshot(engine='xorshift_add', state=bytes(16)))

    def test_snapshot_is_frozen(self) -> None:
        saved = snapshot(SplitMix64.with_state(1))
        with pytest.raises(AttributeError):
            saved.engine = 'other'  # type: ignore[misc]


class TestEncoding:
    """Tests for encode() and decode()."""

    @pytest.mark.parametrize('fmt', ['msgpack', 'json'])
    def test_round_trip(self, engine: Engine, fmt: str) -> None:
        data = encode(snapshot(engine), fmt)  # type: ignore[arg-type]
        restored = restore(decode(data, fmt))  # type: ignore[arg-type]
        assert restored == engine

    def test_json_is_readable(self) -> None:
        data = encode(snapshot(SplitMix64.with_state(0)), 'json')
        assert msgspec.json.decode(data) == {'engine': 'splitmix64', 'state': 'AAAAAAAAAAA='}

    def test_malformed_payload_raises(self) -> None:
        with pytest.raises(InvalidStateError):
            decode(b'not msgpack at all')

    def test_invalid_engine_name_raises(self) -> None:
        data = msgspec.json.encode({'engine': 'Bad Name!', 'state': ''})
        with pytest.raises(InvalidStateError):
            decode(data, 'json')
