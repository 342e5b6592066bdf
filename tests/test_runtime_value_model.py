from __future__ import annotations

import math
import unittest

from hexi.ast import Number
from hexi.parser import parse
from hexi.values import (
    Collection,
    IndexKey,
    NumberKey,
    StringKey,
    ValueKind,
    as_index,
    compare_values,
    format_number,
    format_value,
    is_truthy,
    kind_of,
    validate_value,
    values_equal,
)


class RuntimeValueModelTests(unittest.TestCase):
    def test_number_display_drops_integral_fraction(self) -> None:
        self.assertEqual(format_number(5.0), "5")
        self.assertEqual(format_number(-12.0), "-12")
        self.assertEqual(format_number(1.5), "1.5")
        self.assertEqual(format_number(0.1 + 0.2), "0.30000000000000004")

    def test_number_display_never_uses_exponent(self) -> None:
        self.assertEqual(format_number(1e21), "1000000000000000000000")
        self.assertEqual(format_number(1e-7), "0.0000001")
        self.assertEqual(format_number(2.5e-10), "0.00000000025")

    def test_number_display_special_values(self) -> None:
        self.assertEqual(format_number(0.0), "0")
        self.assertEqual(format_number(-0.0), "-0")
        self.assertEqual(format_number(math.nan), "NaN")
        self.assertEqual(format_number(math.inf), "inf")
        self.assertEqual(format_number(-math.inf), "-inf")

    def test_number_display_round_trips_through_parser(self) -> None:
        for value in (5.0, 0.1, 123.456, 1e300, 2.5e-10, 12345678901234567890.0, 2.0**53 + 2, 1 / 3):
            with self.subTest(value=value):
                expr = parse(format_number(value))
                self.assertIsInstance(expr, Number)
                assert isinstance(expr, Number)
                self.assertEqual(expr.value, value)

    def test_scalar_display(self) -> None:
        self.assertEqual(format_value(None), "nil")
        self.assertEqual(format_value(True), "true")
        self.assertEqual(format_value(False), "false")
        self.assertEqual(format_value("raw text"), "raw text")

    def test_array_like_display(self) -> None:
        coll = Collection.from_values([1.0, "a", None, True, Collection()])
        self.assertEqual(format_value(coll), "[1, a, nil, true, []]")

    def test_map_display(self) -> None:
        coll = Collection.from_pairs([("name", "ok"), ("n", 2.0)])
        coll.insert(NumberKey("1.5"), "x")
        self.assertEqual(format_value(coll), "[name = ok, n = 2, 1.5 = x]")

    def test_sparse_insert_grows_size_and_reads_nil(self) -> None:
        coll = Collection()
        coll.insert(IndexKey(2), 1.0)
        self.assertEqual(coll.size, 3)
        self.assertIsNone(coll.get_by_index(0))
        self.assertEqual(format_value(coll), "[nil, nil, 1]")

    def test_array_like_rule(self) -> None:
        self.assertTrue(Collection().is_array_like())
        self.assertTrue(Collection.from_values([1.0]).is_array_like())
        self.assertFalse(Collection.from_pairs([("a", 1.0)]).is_array_like())

        mixed = Collection.from_values([1.0])
        mixed.insert(StringKey("a"), 2.0)
        self.assertTrue(mixed.is_array_like())
        self.assertEqual(mixed.length(), 1)
        self.assertEqual(len(mixed.entries), 2)

    def test_map_length_counts_entries(self) -> None:
        coll = Collection.from_pairs([("a", 1.0), ("b", 2.0)])
        coll.insert(NumberKey("3"), 3.0)
        self.assertEqual(coll.size, 0)
        self.assertEqual(coll.length(), 3)

    def test_push_and_pop(self) -> None:
        coll = Collection()
        self.assertIsNone(coll.pop())
        coll.push("a")
        coll.push("b")
        self.assertEqual(coll.size, 2)
        self.assertEqual(coll.pop(), "b")
        self.assertEqual(coll.size, 1)
        self.assertEqual(coll.get(IndexKey(0)), "a")

    def test_copy_is_independent_at_top_level(self) -> None:
        inner = Collection.from_values([1.0])
        outer = Collection.from_values([inner])
        clone = outer.copy()
        clone.push(2.0)
        self.assertEqual(outer.size, 1)
        self.assertEqual(clone.size, 2)
        self.assertIs(clone.get_by_index(0), inner)

    def test_numeric_and_index_keys_are_distinct(self) -> None:
        coll = Collection()
        coll.insert(NumberKey("0"), "numeric")
        coll.insert(IndexKey(0), "positional")
        self.assertEqual(len(coll.entries), 2)
        self.assertEqual(coll.get(NumberKey("0")), "numeric")
        self.assertEqual(coll.get(IndexKey(0)), "positional")

    def test_truthiness(self) -> None:
        self.assertTrue(is_truthy(0.0))
        self.assertTrue(is_truthy(""))
        self.assertTrue(is_truthy(True))
        self.assertTrue(is_truthy(Collection.from_values([None])))
        self.assertFalse(is_truthy(False))
        self.assertFalse(is_truthy(None))
        self.assertFalse(is_truthy(Collection()))

    def test_equality_is_kind_strict(self) -> None:
        self.assertTrue(values_equal(1.0, 1.0))
        self.assertFalse(values_equal(1.0, True))
        self.assertFalse(values_equal(0.0, False))
        self.assertFalse(values_equal("1", 1.0))
        self.assertFalse(values_equal(math.nan, math.nan))
        self.assertTrue(values_equal(None, None))

    def test_collection_equality_is_structural(self) -> None:
        left = Collection.from_values([1.0, Collection.from_pairs([("a", "x")])])
        right = Collection.from_values([1.0, Collection.from_pairs([("a", "x")])])
        self.assertTrue(values_equal(left, right))
        self.assertEqual(left, right)

        sized = Collection.from_values([1.0])
        sized.size = 3
        self.assertFalse(values_equal(sized, Collection.from_values([1.0])))
        self.assertFalse(values_equal(Collection.from_values([1.0]), Collection.from_values([True])))

    def test_ordering_within_kinds_only(self) -> None:
        self.assertEqual(compare_values(1.0, 2.0), -1)
        self.assertEqual(compare_values("b", "a"), 1)
        self.assertEqual(compare_values(False, True), -1)
        self.assertEqual(compare_values(2.0, 2.0), 0)
        self.assertIsNone(compare_values(1.0, "1"))
        self.assertIsNone(compare_values(1.0, True))
        self.assertIsNone(compare_values(None, None))
        self.assertIsNone(compare_values(Collection(), Collection()))
        self.assertIsNone(compare_values(math.nan, 1.0))

    def test_index_conversion_truncates_and_saturates(self) -> None:
        self.assertEqual(as_index(2.9), 2)
        self.assertEqual(as_index(0.0), 0)
        self.assertEqual(as_index(-3.0), 0)
        self.assertEqual(as_index(math.nan), 0)
        self.assertGreater(as_index(math.inf), 2**32)

    def test_kinds(self) -> None:
        self.assertIs(kind_of(True), ValueKind.BOOL)
        self.assertIs(kind_of(1.0), ValueKind.NUMBER)
        self.assertIs(kind_of("s"), ValueKind.STRING)
        self.assertIs(kind_of(None), ValueKind.NIL)
        self.assertIs(kind_of(Collection()), ValueKind.COLLECTION)

    def test_validator_rejects_unsupported_runtime_value(self) -> None:
        class Unsupported:
            pass

        with self.assertRaises(TypeError):
            validate_value(Unsupported(), where="unsupported")
        with self.assertRaises(TypeError):
            validate_value(Collection.from_values([1]), where="nested")


if __name__ == "__main__":
    unittest.main()
