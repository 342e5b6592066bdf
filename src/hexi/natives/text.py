"""The ``string`` module."""

from __future__ import annotations

from .base import NativeModule, check_arity, string_arg
from ..errors import HexiTypeError
from ..values import Collection, format_value


def len_native(args):
    check_arity(args, 1, where="string::len")
    return float(len(string_arg(args, 0, where="string::len").encode("utf-8")))


def concat_native(args):
    return "".join(format_value(arg) for arg in args)


def upper_native(args):
    check_arity(args, 1, where="string::upper")
    return string_arg(args, 0, where="string::upper").upper()


def lower_native(args):
    check_arity(args, 1, where="string::lower")
    return string_arg(args, 0, where="string::lower").lower()


def trim_native(args):
    check_arity(args, 1, where="string::trim")
    return string_arg(args, 0, where="string::trim").strip()


def contains_native(args):
    check_arity(args, 2, where="string::contains")
    haystack = string_arg(args, 0, where="string::contains")
    return string_arg(args, 1, where="string::contains") in haystack


def split_native(args):
    if len(args) not in {1, 2}:
        raise HexiTypeError(f"string::split expects 1 or 2 arguments, got {len(args)}")
    text = string_arg(args, 0, where="string::split")
    if len(args) == 1:
        parts = text.split()
    else:
        sep = string_arg(args, 1, where="string::split")
        parts = list(text) if sep == "" else text.split(sep)
    return Collection.from_values(parts)


def to_number_native(args):
    check_arity(args, 1, where="string::to_number")
    try:
        return float(string_arg(args, 0, where="string::to_number").strip())
    except ValueError:
        return None


def to_string_native(args):
    check_arity(args, 1, where="string::to_string")
    return format_value(args[0])


STRING_MODULE = NativeModule(
    name="string",
    functions=(
        ("len", len_native),
        ("concat", concat_native),
        ("upper", upper_native),
        ("lower", lower_native),
        ("trim", trim_native),
        ("contains", contains_native),
        ("split", split_native),
        ("to_number", to_number_native),
        ("to_string", to_string_native),
    ),
)
