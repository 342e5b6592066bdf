"""Runtime value model for the hexi evaluator.

Numbers are Python floats, strings are ``str``, booleans are ``bool`` and
nil is ``None``. Arrays and maps share one type, :class:`Collection`.
"""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class IndexKey:
    index: int


@dataclass(frozen=True)
class StringKey:
    text: str


@dataclass(frozen=True)
class NumberKey:
    """Numeric map key, stored as the display text of the float."""

    text: str


CollectionKey = Union[IndexKey, StringKey, NumberKey]


@dataclass(eq=False)
class Collection:
    """Unified array/map value.

    ``size`` tracks the positional extent (one past the highest index
    inserted), which is not the entry count once string or number keys are
    mixed in.
    """

    entries: dict[CollectionKey, "Value"] = field(default_factory=dict)
    size: int = 0

    @classmethod
    def from_values(cls, values) -> "Collection":
        out = cls()
        for value in values:
            out.push(value)
        return out

    @classmethod
    def from_pairs(cls, pairs) -> "Collection":
        out = cls()
        for key, value in pairs:
            out.insert(StringKey(key), value)
        return out

    def copy(self) -> "Collection":
        # Nested collections are shared; mutation only ever touches a fresh top level.
        return Collection(entries=dict(self.entries), size=self.size)

    def get(self, key: CollectionKey) -> "Value":
        return self.entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def insert(self, key: CollectionKey, value: "Value") -> None:
        if isinstance(key, IndexKey) and key.index >= self.size:
            self.size = key.index + 1
        self.entries[key] = value

    def push(self, value: "Value") -> None:
        self.entries[IndexKey(self.size)] = value
        self.size += 1

    def pop(self) -> "Value":
        if self.size == 0:
            return None
        self.size -= 1
        return self.entries.pop(IndexKey(self.size), None)

    def length(self) -> int:
        if self.is_array_like():
            return self.size
        return len(self.entries)

    def is_array_like(self) -> bool:
        return self.size > 0 or all(isinstance(key, IndexKey) for key in self.entries)

    def get_by_index(self, index: int) -> "Value":
        return self.entries.get(IndexKey(index))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return values_equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Collection({format_value(self)})"


Value = Union[float, str, bool, None, Collection]


class ValueKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    BOOL = "bool"
    NIL = "nil"
    COLLECTION = "collection"


def is_number(value: object) -> bool:
    return isinstance(value, float)


def kind_of(value: object) -> ValueKind:
    if value is None:
        return ValueKind.NIL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, Collection):
        return ValueKind.COLLECTION
    raise TypeError(f"unsupported runtime type {type(value).__name__}")


def type_name(value: object) -> str:
    return kind_of(value).value


def validate_value(value: object, *, where: str = "value") -> None:
    if value is None or isinstance(value, (bool, float, str)):
        return
    if isinstance(value, Collection):
        for key, item in value.entries.items():
            validate_value(item, where=f"{where}[{format_key(key)}]")
        return
    raise TypeError(f"{where} has unsupported runtime type {type(value).__name__}")


def as_index(number: float) -> int:
    """Truncate a number to an unsigned index, saturating at both ends."""
    if math.isnan(number) or number <= 0:
        return 0
    if math.isinf(number):
        return sys.maxsize
    return int(number)


def is_truthy(value: Value) -> bool:
    if value is None or value is False:
        return False
    if isinstance(value, Collection):
        return bool(value.entries)
    return True


def values_equal(left: Value, right: Value) -> bool:
    left_kind = kind_of(left)
    if left_kind is not kind_of(right):
        return False
    if left_kind is ValueKind.COLLECTION:
        assert isinstance(left, Collection) and isinstance(right, Collection)
        if left.size != right.size or left.entries.keys() != right.entries.keys():
            return False
        return all(values_equal(item, right.entries[key]) for key, item in left.entries.items())
    return left == right


def compare_values(left: Value, right: Value) -> int | None:
    """Partial order over same-kind numbers, strings and bools; None when unordered."""
    left_kind = kind_of(left)
    if left_kind is not kind_of(right) or left_kind not in {ValueKind.NUMBER, ValueKind.STRING, ValueKind.BOOL}:
        return None
    if left < right:  # type: ignore[operator]
        return -1
    if left > right:  # type: ignore[operator]
        return 1
    if left == right:
        return 0
    return None


def format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    # Shortest round-trip digits, expanded without exponent notation.
    digits = Decimal(repr(number))
    if number.is_integer():
        digits = digits.to_integral_value()
    return format(digits, "f")


def format_key(key: CollectionKey) -> str:
    if isinstance(key, IndexKey):
        return str(key.index)
    return key.text


def format_value(value: Value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if value.is_array_like():
        items = (format_value(value.get_by_index(i)) for i in range(value.size))
        return f"[{', '.join(items)}]"
    pairs = (f"{format_key(key)} = {format_value(item)}" for key, item in value.entries.items())
    return f"[{', '.join(pairs)}]"
