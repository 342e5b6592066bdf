"""The ``io`` module: console output and line input."""

from __future__ import annotations

import sys

from .base import NativeModule, check_max_arity
from ..values import format_value


def _write_line(args) -> None:
    sys.stdout.write(" ".join(format_value(arg) for arg in args) + "\n")


def print_native(args):
    _write_line(args)
    return None


def println_native(args):
    _write_line(args)
    return None


def input_native(args):
    check_max_arity(args, 1, where="io::input")
    if args:
        sys.stdout.write(format_value(args[0]))
        sys.stdout.flush()

    line = sys.stdin.readline()
    if line.endswith("\n"):
        line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
    return line


IO_MODULE = NativeModule(
    name="io",
    functions=(
        ("print", print_native),
        ("println", println_native),
        ("input", input_native),
    ),
    prelude=True,
)
