"""Error types: dual struct+exception for Result-style and raise-based code.

Every failure the library reports comes in two shapes. The struct variant is a
frozen msgspec struct that can be returned as a value, logged, or serialized.
The exception variant is what the public API raises. Each converts to the other.
"""

from __future__ import annotations

import msgspec

__all__ = [
    'ArgumentOutOfRange',
    'ArgumentOutOfRangeError',
    'InvalidArgument',
    'InvalidArgumentError',
    'InvalidState',
    'InvalidStateError',
    'UnsupportedOperation',
    'UnsupportedOperationError',
]


# --- Argument Errors ---


class InvalidArgument(msgspec.Struct, frozen=True, gc=False):
    """Malformed argument combination - struct variant."""

    param: str
    message: str

    def to_exception(self) -> InvalidArgumentError:
        """Convert to exception for raise-based code."""
        return InvalidArgumentError(self.param, self.message)


class InvalidArgumentError(ValueError):
    """Malformed argument combination - exception variant.

    Attributes:
        param: Name of the offending parameter.
        message: Human readable description of the problem.
    """

    def __init__(self, param: str, message: str | None = None) -> None:
        self.param = param
        self.message = message or 'Invalid argument'
        super().__init__(f'{self.message} (parameter: {param})')

    def to_struct(self) -> InvalidArgument:
        """Convert to struct for Result-based code."""
        return InvalidArgument(self.param, self.message)


class ArgumentOutOfRange(msgspec.Struct, frozen=True, gc=False):
    """Single argument outside its valid domain - struct variant."""

    param: str
    message: str
    value: float | int | None = None

    def to_exception(self) -> ArgumentOutOfRangeError:
        """Convert to exception for raise-based code."""
        return ArgumentOutOfRangeError(self.param, self.message, self.value)


class ArgumentOutOfRangeError(InvalidArgumentError):
    """Single argument outside its valid domain - exception variant."""

    def __init__(self, param: str, message: str | None = None, value: float | None = None) -> None:
        self.value = value
        super().__init__(param, message or 'Argument out of range')

    def to_struct(self) -> ArgumentOutOfRange:  # type: ignore[override]
        """Convert to struct for Result-based code."""
        return ArgumentOutOfRange(self.param, self.message, self.value)


# --- State Errors ---


class InvalidState(msgspec.Struct, frozen=True, gc=False):
    """Corrupt, incompatible or degenerate engine state - struct variant."""

    engine: str
    reason: str

    def to_exception(self) -> InvalidStateError:
        """Convert to exception for raise-based code."""
        return InvalidStateError(self.engine, self.reason)


class InvalidStateError(ValueError):
    """Corrupt, incompatible or degenerate engine state - exception variant."""

    def __init__(self, engine: str, reason: str | None = None) -> None:
        self.engine = engine
        self.reason = reason or 'Invalid state'
        super().__init__(f'{engine}: {self.reason}')

    def to_struct(self) -> InvalidState:
        """Convert to struct for Result-based code."""
        return InvalidState(self.engine, self.reason)


# --- Capability Errors ---


class UnsupportedOperation(msgspec.Struct, frozen=True, gc=False):
    """Operation the engine declares it cannot perform - struct variant."""

    engine: str
    operation: str

    def to_exception(self) -> UnsupportedOperationError:
        """Convert to exception for raise-based code."""
        return UnsupportedOperationError(self.engine, self.operation)


class UnsupportedOperationError(NotImplementedError):
    """Operation the engine declares it cannot perform - exception variant."""

    def __init__(self, engine: str, operation: str) -> None:
        self.engine = engine
        self.operation = operation
        super().__init__(f'{engine} does not support {operation}()')

    def to_struct(self) -> UnsupportedOperation:
        """Convert to struct for Result-based code."""
        return UnsupportedOperation(self.engine, self.operation)
