"""Structured error types for parser/runtime separation."""

from __future__ import annotations


class HexiError(Exception):
    """Base class for structured hexi errors."""


class HexiParseError(HexiError, SyntaxError):
    """Structural mismatch found while parsing a token stream."""

    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


class HexiRuntimeError(HexiError):
    """Generic runtime failure after successful parse."""


class HexiNameError(HexiRuntimeError):
    """Undefined or duplicate variable, function or module name."""


class HexiTypeError(HexiRuntimeError):
    """Runtime type/value-kind or argument-count mismatch."""


class HexiArithmeticError(HexiRuntimeError):
    """Division or modulo by zero."""


class HexiIndexError(HexiRuntimeError):
    """Out-of-bounds index on a mutating collection operation."""
