"""The optional ``json`` module."""

from __future__ import annotations

import json

from .base import NativeModule, check_arity, string_arg
from ..errors import HexiRuntimeError
from ..values import Collection, format_key


def _from_json(data):
    if isinstance(data, dict):
        return Collection.from_pairs((key, _from_json(item)) for key, item in data.items())
    if isinstance(data, list):
        return Collection.from_values(_from_json(item) for item in data)
    if isinstance(data, bool) or data is None or isinstance(data, str):
        return data
    return float(data)


def _to_json(value):
    if isinstance(value, Collection):
        if value.is_array_like():
            return [_to_json(value.get_by_index(i)) for i in range(value.size)]
        return {format_key(key): _to_json(item) for key, item in value.entries.items()}
    if isinstance(value, float) and value.is_integer() and abs(value) < 2**53:
        return int(value)
    return value


def parse_native(args):
    check_arity(args, 1, where="json::parse")
    content = string_arg(args, 0, where="json::parse")
    try:
        # Integers beyond float range become inf instead of overflowing.
        data = json.loads(content, parse_int=float)
    except json.JSONDecodeError as err:
        raise HexiRuntimeError(f"error while parsing json: {err}") from err
    return _from_json(data)


def stringify_native(args):
    check_arity(args, 1, where="json::stringify")
    try:
        return json.dumps(_to_json(args[0]), allow_nan=False)
    except ValueError as err:
        raise HexiRuntimeError(f"error while writing json: {err}") from err


JSON_MODULE = NativeModule(
    name="json",
    functions=(
        ("parse", parse_native),
        ("stringify", stringify_native),
    ),
)
