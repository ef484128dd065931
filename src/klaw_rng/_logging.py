"""Structured logging for klaw-rng.

Engines, seeding and ziggurat table construction report through structlog,
rendered by stdlib ``logging`` via ``ProcessorFormatter`` so the events land
next to whatever the host application already logs.

Events emitted by the library (never from the per-draw hot paths):

    ======================== ======= ======================================
    event                    level   fields
    ======================== ======= ======================================
    seed_from_entropy        debug   counter
    seed_attempt_all_zero    warning engine, attempt
    snapshot_restored        debug   engine, state_bytes
    ziggurat_table_built     debug   size, iterations, duration_ms
    ziggurat_table_imprecise warning size, error, epsilon
    ======================== ======= ======================================

Events from ``klaw_rng.*`` loggers also carry ``component``, the emitting
module relative to the package (``samplers.ziggurat``, ``seed``).

Usage:
    >>> from klaw_rng import add_log_hook, configure_logging
    >>> configure_logging('DEBUG', json_output=False)
    >>> add_log_hook(lambda event: print(event['event']))
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    type LogHook = Callable[[dict[str, Any]], None]

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]

_PACKAGE_PREFIX = 'klaw_rng.'


class _RngHandler(logging.StreamHandler):
    """Root handler installed by configure_logging; replaced on reconfiguration."""


def _add_component(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    name = event_dict.get('logger')
    if isinstance(name, str) and name.startswith(_PACKAGE_PREFIX):
        event_dict.setdefault('component', name.removeprefix(_PACKAGE_PREFIX))
    return event_dict


def _pre_chain() -> list[Any]:
    """Processors applied to structlog events and to foreign stdlib records alike."""
    import structlog

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _dispatch_hooks,
    ]


def configure_logging(level: str = 'INFO', *, json_output: bool = True) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Calling this again swaps the handler it installed earlier. Handlers the
    host application put on the root logger are left alone.

    Args:
        level: Root level name ("DEBUG", "INFO", ...). Unknown names fall
            back to INFO.
        json_output: Render JSON lines, or colored console output when False.
    """
    import structlog

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = _RngHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    for existing in [h for h in root_logger.handlers if isinstance(h, _RngHandler)]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> Any:
    """Lazily bound structlog logger, normally ``get_logger(__name__)``."""
    import structlog

    return structlog.get_logger(name)


# --- Hooks ---

# Replaced rather than mutated, so a hook may add or remove hooks mid-dispatch.
_log_hooks: tuple[LogHook, ...] = ()


def add_log_hook(hook: LogHook) -> None:
    """Call ``hook`` with a private copy of every subsequent event dict."""
    global _log_hooks
    _log_hooks = (*_log_hooks, hook)


def remove_log_hook(hook: LogHook) -> None:
    """Unregister every registration of ``hook``; unknown hooks are ignored."""
    global _log_hooks
    _log_hooks = tuple(h for h in _log_hooks if h != hook)


def clear_log_hooks() -> None:
    global _log_hooks
    _log_hooks = ()


def _dispatch_hooks(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for hook in _log_hooks:
        try:
            hook(event_dict.copy())
        except Exception as e:  # noqa: BLE001
            # Logging this would re-enter the failing hook.
            sys.stderr.write(f'klaw_rng log hook {hook!r} raised {e!r}\n')
    return event_dict
