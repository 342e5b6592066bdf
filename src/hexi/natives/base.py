"""Shared shapes and argument checks for native modules."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..errors import HexiTypeError
from ..values import Value, format_value

NativeFunction = Callable[[Sequence[Value]], Value]


@dataclass(frozen=True)
class NativeModule:
    """A named table of native functions.

    Prelude modules additionally expose their functions under bare names.
    Constants are bound as ``module::name`` variables when the module loads.
    """

    name: str
    functions: tuple[tuple[str, NativeFunction], ...]
    constants: tuple[tuple[str, Value], ...] = ()
    prelude: bool = False


def check_arity(args: Sequence[Value], count: int, *, where: str) -> None:
    if len(args) != count:
        plural = "argument" if count == 1 else "arguments"
        raise HexiTypeError(f"{where} expects {count} {plural}, got {len(args)}")


def check_max_arity(args: Sequence[Value], count: int, *, where: str) -> None:
    if len(args) > count:
        raise HexiTypeError(f"too many arguments for {where}, got {len(args)}")


def number_arg(args: Sequence[Value], index: int, *, where: str) -> float:
    value = args[index]
    if not isinstance(value, float) or isinstance(value, bool):
        raise HexiTypeError(f"not a number in {where}, got {format_value(value)}")
    return value


def string_arg(args: Sequence[Value], index: int, *, where: str) -> str:
    value = args[index]
    if not isinstance(value, str):
        raise HexiTypeError(f"not a string in {where}, got {format_value(value)}")
    return value
