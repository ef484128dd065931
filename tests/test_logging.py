"""Tests for logging configuration, hooks, and the events the library emits."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest
from klaw_rng._logging import (
    _RngHandler,
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)
from klaw_rng.engines import SplitMix64, XorShiftAdd
from klaw_rng.seed import EntropyCounter, SeedDiffuser
from klaw_rng.snapshot import restore, snapshot

from tests.strategies import ZeroEngine

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def captured(cleanup_hooks: None) -> Generator[list[dict[str, Any]]]:
    """Configure logging and collect every event dict."""
    received: list[dict[str, Any]] = []
    configure_logging(level='DEBUG', json_output=True)
    add_log_hook(received.append)
    yield received


def _events(received: list[dict[str, Any]], name: str) -> list[dict[str, Any]]:
    return [e for e in received if e.get('event') == name]


class TestLogHooks:
    """Tests for logging hooks functionality."""

    def test_hook_receives_log_events(self, captured: list[dict[str, Any]]) -> None:
        """Registered hooks receive log entry dicts."""
        get_logger('test').info('Test message', extra_field='extra_value')

        entries = _events(captured, 'Test message')
        assert len(entries) == 1
        assert entries[0]['extra_field'] == 'extra_value'

    def test_remove_hook(self, captured: list[dict[str, Any]]) -> None:
        """remove_log_hook() stops hook from being called."""
        calls: list[str] = []

        def hook(event_dict: dict[str, Any]) -> None:
            calls.append('called')

        add_log_hook(hook)
        get_logger('test').info('First')
        assert len(calls) == 1

        remove_log_hook(hook)
        get_logger('test').info('Second')
        assert len(calls) == 1

    def test_remove_unknown_hook_is_noop(self) -> None:
        remove_log_hook(lambda event: None)

    def test_clear_hooks(self, captured: list[dict[str, Any]]) -> None:
        clear_log_hooks()
        get_logger('test').info('Dropped')
        assert _events(captured, 'Dropped') == []

    def test_hooks_receive_copies(self, captured: list[dict[str, Any]]) -> None:
        """Mutating the received dict does not leak into other hooks."""

        def mutate(event_dict: dict[str, Any]) -> None:
            event_dict['event'] = 'mutated'

        clear_log_hooks()
        add_log_hook(mutate)
        add_log_hook(captured.append)
        get_logger('test').info('Original')
        assert len(_events(captured, 'Original')) == 1

    def test_failing_hook_does_not_break_logging(self, captured: list[dict[str, Any]]) -> None:
        def broken(event_dict: dict[str, Any]) -> None:
            raise RuntimeError('hook failure')

        clear_log_hooks()
        add_log_hook(broken)
        add_log_hook(captured.append)
        get_logger('test').info('Survives')
        assert len(_events(captured, 'Survives')) == 1

    def test_hook_may_remove_itself(self, captured: list[dict[str, Any]]) -> None:
        def once(event_dict: dict[str, Any]) -> None:
            remove_log_hook(once)

        clear_log_hooks()
        add_log_hook(once)
        add_log_hook(captured.append)
        get_logger('test').info('First')
        get_logger('test').info('Second')
        assert [e['event'] for e in captured] == ['First', 'Second']


class TestConfigureLogging:
    """Tests for configure_logging handler management."""

    def test_reconfigure_keeps_foreign_handlers(self) -> None:
        root = logging.getLogger()
        foreign = logging.NullHandler()
        root.addHandler(foreign)
        try:
            configure_logging(level='WARNING')
            configure_logging(level='DEBUG')
            assert foreign in root.handlers
            assert sum(1 for h in root.handlers if isinstance(h, _RngHandler)) == 1
            assert root.level == logging.DEBUG
        finally:
            root.removeHandler(foreign)

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(level='chatty')
        assert logging.getLogger().level == logging.INFO


class TestLibraryEvents:
    """The library reports seeding, table builds and restores."""

    def test_entropy_seeding_logged(self, captured: list[dict[str, Any]]) -> None:
        SeedDiffuser.from_entropy(EntropyCounter())
        entries = _events(captured, 'seed_from_entropy')
        assert len(entries) == 1
        assert entries[0]['level'] == 'debug'

    def test_all_zero_seed_attempts_warn(self, captured: list[dict[str, Any]]) -> None:
        with pytest.raises(ValueError):
            XorShiftAdd(ZeroEngine())
        entries = _events(captured, 'seed_attempt_all_zero')
        assert [e['attempt'] for e in entries] == [1, 2, 3, 4]
        assert all(e['level'] == 'warning' for e in entries)

    def test_snapshot_restore_logged(self, captured: list[dict[str, Any]]) -> None:
        restore(snapshot(SplitMix64(1)))
        entries = _events(captured, 'snapshot_restored')
        assert entries[0]['engine'] == 'splitmix64'
        assert entries[0]['state_bytes'] == 8

    def test_table_build_logged(self, captured: list[dict[str, Any]]) -> None:
        from klaw_rng.samplers.exponential import build_exponential_table

        build_exponential_table.cache_clear()
        build_exponential_table(16)
        entries = _events(captured, 'ziggurat_table_built')
        assert entries[0]['size'] == 16
        assert entries[0]['iterations'] >= 1
        assert 'duration_ms' in entries[0]
        assert entries[0]['component'] == 'samplers.ziggurat'

    def test_component_only_for_library_loggers(self, captured: list[dict[str, Any]]) -> None:
        restore(snapshot(SplitMix64(1)))
        get_logger('host.app').info('host_event')
        assert _events(captured, 'snapshot_restored')[0]['component'] == 'snapshot'
        assert 'component' not in _events(captured, 'host_event')[0]

    def test_draws_do_not_log(self, captured: list[dict[str, Any]]) -> None:
        engine = XorShiftAdd(7)
        captured.clear()
        for _ in range(100):
            engine.next64()
        assert captured == []
