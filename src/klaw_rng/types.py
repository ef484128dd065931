"""Constrained type aliases for decode-time validation.

Used by the persisted structs (engine snapshots, ziggurat tables) so that
out-of-range words are rejected by msgspec while decoding rather than
surfacing later as silently wrong output.

Usage:
    >>> import msgspec
    >>> from klaw_rng.types import Word64
    >>>
    >>> class State(msgspec.Struct):
    ...     word: Word64
    >>>
    >>> msgspec.json.decode(b'{"word": -1}', type=State)
    # ValidationError: Expected `int` >= 0 - at `$.word`

See Also:
    - https://jcristharif.com/msgspec/constraints.html
"""

from __future__ import annotations

from typing import Annotated

import msgspec

__all__ = [
    'MASK32',
    'MASK64',
    'EngineName',
    'TableMagnitude',
    'Word64',
]

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# -----------------------------------------------------------------------------
# Word Constraints
# -----------------------------------------------------------------------------

Word64 = Annotated[int, msgspec.Meta(ge=0, le=MASK64)]
"""Unsigned 64-bit word.

Valid: 0, 1, 0xFFFFFFFFFFFFFFFF
Invalid: -1, 2**64
"""

# -----------------------------------------------------------------------------
# Table Constraints
# -----------------------------------------------------------------------------

TableMagnitude = Annotated[int, msgspec.Meta(ge=2, le=16)]
"""log2 of a ziggurat table size (4 to 65,536 segments)."""

# -----------------------------------------------------------------------------
# Identifier Constraints
# -----------------------------------------------------------------------------

EngineName = Annotated[str, msgspec.Meta(min_length=1, max_length=64, pattern=r'^[a-z0-9_]+$')]
"""Registry name of an engine, e.g. ``xorshift_add``."""
