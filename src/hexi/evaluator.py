"""Tree-walk evaluator for the hexi scripting language."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import MutableMapping, Sequence
from functools import lru_cache
from typing import Callable, Final

from .ast import (
    Assignment,
    BinaryOp,
    Block,
    Call,
    CollectionLiteral,
    Expr,
    FieldAccess,
    Identifier,
    If,
    Include,
    IndexAccess,
    KeyedEntry,
    MethodCall,
    Number,
    NumberKeyedEntry,
    PositionalEntry,
    Program,
    String,
    UnaryOp,
    VarDecl,
)
from .errors import HexiArithmeticError, HexiIndexError, HexiNameError, HexiRuntimeError, HexiTypeError
from .natives import STANDARD_MODULES, NativeFunction, NativeModule, find_optional_module
from .parser import parse_program
from .values import (
    Collection,
    CollectionKey,
    IndexKey,
    NumberKey,
    StringKey,
    Value,
    as_index,
    compare_values,
    format_number,
    is_number,
    is_truthy,
    type_name,
    validate_value,
    values_equal,
)

logger = logging.getLogger("hexi.evaluator")

_PROGRAM_CACHE_MAX: Final[int] = max(1, int(os.environ.get("HEXI_PROGRAM_CACHE_MAX", "256")))


@lru_cache(maxsize=_PROGRAM_CACHE_MAX)
def _parse_program_cached(source: str) -> Program:
    return parse_program(source)


_ORDERINGS: Final[dict[str, Callable[[int], bool]]] = {
    "<": lambda order: order < 0,
    ">": lambda order: order > 0,
    "<=": lambda order: order <= 0,
    ">=": lambda order: order >= 0,
}


def _modulo(left: float, right: float) -> float:
    # fmod of an infinite or NaN dividend is NaN rather than a domain error.
    if math.isinf(left) or math.isnan(left):
        return math.nan
    return math.fmod(left, right)


_ARITHMETIC: Final[dict[str, Callable[[float, float], float]]] = {
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    "/": lambda left, right: left / right,
    "%": _modulo,
}

_ZERO_DIVISOR_MESSAGES: Final[dict[str, str]] = {
    "/": "division by zero",
    "%": "modulo by zero",
}

_MUTATING_METHODS: Final[frozenset[str]] = frozenset({"push", "pop", "insert"})


class Environment(MutableMapping[str, Value]):
    """Flat variable table shared by every block and branch of a run."""

    def __init__(self, data: MutableMapping[str, Value] | None = None) -> None:
        self.data: dict[str, Value] = {}
        if data is not None:
            for name, value in data.items():
                self[name] = value

    def __getitem__(self, key: str) -> Value:
        return self.data[key]

    def __setitem__(self, key: str, value: Value) -> None:
        validate_value(value, where=f"variable {key!r}")
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self):
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def define(self, key: str, value: Value) -> None:
        if key in self.data:
            raise HexiNameError(f"variable '{key}' already defined!")
        self[key] = value

    def set_existing(self, key: str, value: Value) -> None:
        if key not in self.data:
            raise HexiNameError(f"variable '{key}' not defined!")
        self[key] = value


def _collection_key(value: Value, *, what: str) -> CollectionKey:
    if is_number(value):
        return IndexKey(as_index(value))
    if isinstance(value, str):
        return StringKey(value)
    raise HexiTypeError(f"{what} must be a number or string")


def _check_method_arity(args: Sequence[Value], count: int, *, method: str, receiver: str) -> None:
    if len(args) != count:
        expects = {0: "no arguments", 1: "1 argument"}.get(count, f"{count} arguments")
        raise HexiTypeError(f"{method} method on {receiver} expects {expects}, got {len(args)}")


def _call_collection_method(collection: Collection, method: str, args: Sequence[Value]) -> Value:
    if method == "push":
        _check_method_arity(args, 1, method=method, receiver="array")
        collection.push(args[0])
        return None

    if method == "pop":
        _check_method_arity(args, 0, method=method, receiver="array")
        return collection.pop()

    if method == "size":
        _check_method_arity(args, 0, method=method, receiver="array")
        return float(collection.length())

    if method == "get":
        _check_method_arity(args, 1, method=method, receiver="collection")
        return collection.get(_collection_key(args[0], what="collection key"))

    if method == "insert":
        _check_method_arity(args, 2, method=method, receiver="collection")
        key = _collection_key(args[0], what="insert key")
        if isinstance(key, IndexKey) and collection.is_array_like() and key.index > collection.size:
            raise HexiIndexError(f"index {key.index} is out of bounds")
        collection.insert(key, args[1])
        return None

    raise HexiTypeError(f"unknown method '{method}' for array.")


def _call_string_method(text: str, method: str, args: Sequence[Value]) -> Value:
    if method == "len":
        _check_method_arity(args, 0, method=method, receiver="string")
        return float(len(text.encode("utf-8")))

    raise HexiTypeError(f"unknown method '{method}' for string.")


def call_method(receiver: Value, method: str, args: Sequence[Value]) -> Value:
    """Dispatch a method on (receiver type, method name).

    Collection methods mutate ``receiver`` in place; callers hand in a copy
    when the mutation must not be visible elsewhere.
    """
    if isinstance(receiver, Collection):
        return _call_collection_method(receiver, method, args)
    if isinstance(receiver, str):
        return _call_string_method(receiver, method, args)
    raise HexiTypeError(f"cannot call method '{method}' on {type_name(receiver)}")


def _eval_binary(op: str, left: Value, right: Value) -> Value:
    if op == "==":
        return values_equal(left, right)
    if op == "!=":
        return not values_equal(left, right)

    if op in _ORDERINGS:
        order = compare_values(left, right)
        return order is not None and _ORDERINGS[op](order)

    if op in _ARITHMETIC:
        if not (is_number(left) and is_number(right)):
            raise HexiTypeError("arithmetic operations can only be performed on numbers")
        if op in _ZERO_DIVISOR_MESSAGES and right == 0.0:
            raise HexiArithmeticError(_ZERO_DIVISOR_MESSAGES[op])
        return _ARITHMETIC[op](left, right)

    raise HexiTypeError(f"unsupported binary operator {op!r}")


class Interpreter:
    """Owns one environment and one native registry for the length of a run."""

    def __init__(self, env: MutableMapping[str, Value] | None = None) -> None:
        self.env = env if isinstance(env, Environment) else Environment(env)
        self.natives: dict[str, NativeFunction] = {}
        self.loaded_modules: set[str] = set()
        for module in STANDARD_MODULES:
            self._install_module(module)

    def _install_module(self, module: NativeModule) -> None:
        for name, fn in module.functions:
            self.natives[f"{module.name}_{name}"] = fn
            if module.prelude:
                self.natives[name] = fn
        for name, value in module.constants:
            self.env[f"{module.name}::{name}"] = value
        logger.debug("Loaded native module %s (%d functions)", module.name, len(module.functions))

    def load_module(self, name: str) -> None:
        if name in self.loaded_modules:
            logger.debug("Module %s already loaded", name)
            return
        module = find_optional_module(name)
        if module is None:
            raise HexiNameError(f"module '{name}' not found")
        self._install_module(module)
        self.loaded_modules.add(module.name)

    def run(self, source: str) -> list[Value]:
        """Evaluate every top-level expression, stopping at the first error."""
        program = _parse_program_cached(source)
        results: list[Value] = []
        for expr in program.expressions:
            results.append(self.evaluate_statement(expr))
        return results

    def evaluate_statement(self, expr: Expr) -> Value:
        """Evaluate one top-level expression, reporting runaway nesting as a runtime error."""
        try:
            return self.evaluate(expr)
        except RecursionError:
            raise HexiRuntimeError("expression nesting too deep") from None

    def evaluate(self, expr: Expr) -> Value:
        if isinstance(expr, Number):
            return expr.value

        if isinstance(expr, String):
            return expr.value

        if isinstance(expr, Identifier):
            if expr.name not in self.env:
                raise HexiNameError(f"undefined variable or reference '{expr.name}'")
            return self.env[expr.name]

        if isinstance(expr, Call):
            return self._eval_call(expr)

        if isinstance(expr, VarDecl):
            if expr.name in self.env:
                raise HexiNameError(f"variable '{expr.name}' already defined!")
            self.env.define(expr.name, self.evaluate(expr.value))
            return None

        if isinstance(expr, Assignment):
            if expr.name not in self.env:
                raise HexiNameError(f"variable '{expr.name}' not defined!")
            self.env.set_existing(expr.name, self.evaluate(expr.value))
            return None

        if isinstance(expr, BinaryOp):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return _eval_binary(expr.op, left, right)

        if isinstance(expr, UnaryOp):
            operand = self.evaluate(expr.operand)
            if expr.op != "-":
                raise HexiTypeError(f"unsupported unary operator {expr.op!r}")
            if not is_number(operand):
                raise HexiTypeError("negate unary operator only supported on numbers")
            return -operand

        if isinstance(expr, Block):
            return self._eval_block(expr)

        if isinstance(expr, If):
            if is_truthy(self.evaluate(expr.condition)):
                return self._eval_block(expr.then_block)
            if expr.else_block is not None:
                return self._eval_block(expr.else_block)
            return None

        if isinstance(expr, CollectionLiteral):
            return self._eval_collection(expr)

        if isinstance(expr, IndexAccess):
            obj = self.evaluate(expr.obj)
            index = self.evaluate(expr.index)
            if not isinstance(obj, Collection):
                raise HexiTypeError(f"cannot index into {type_name(obj)}")
            # Reads never fail on a missing key.
            return obj.get(_collection_key(index, what="collection index"))

        if isinstance(expr, MethodCall):
            return self._eval_method_call(expr)

        if isinstance(expr, FieldAccess):
            obj = self.evaluate(expr.obj)
            if not isinstance(obj, Collection):
                raise HexiTypeError(f"cannot access field '{expr.field}' on non object")
            key = StringKey(expr.field)
            if key not in obj:
                raise HexiNameError(f"undefined field '{expr.field}'")
            return obj.get(key)

        if isinstance(expr, Include):
            self.load_module(expr.module)
            return None

        raise TypeError(f"Unsupported expression node: {type(expr)!r}")

    def _eval_block(self, block: Block) -> Value:
        last: Value = None
        for expr in block.exprs:
            last = self.evaluate(expr)
        return last

    def _eval_call(self, call: Call) -> Value:
        args = [self.evaluate(arg) for arg in call.args]

        fn = self.natives.get(call.signature)
        if fn is None:
            fn = self.natives.get(call.name)
        if fn is None:
            shown = call.name if call.module is None else f"{call.module}::{call.name}"
            raise HexiNameError(f"undefined function '{shown}'")

        result = fn(args)
        validate_value(result, where=f"result of {call.signature}")
        return result

    def _eval_collection(self, literal: CollectionLiteral) -> Collection:
        out = Collection()
        index = 0
        for entry in literal.entries:
            value = self.evaluate(entry.value)
            if isinstance(entry, PositionalEntry):
                out.insert(IndexKey(index), value)
                index += 1
            elif isinstance(entry, KeyedEntry):
                out.insert(StringKey(entry.key), value)
            elif isinstance(entry, NumberKeyedEntry):
                out.insert(NumberKey(format_number(entry.key)), value)
            else:
                raise TypeError(f"Unsupported collection entry: {type(entry)!r}")
        if index > 0:
            out.size = index
        return out

    def _eval_method_call(self, call: MethodCall) -> Value:
        args = [self.evaluate(arg) for arg in call.args]
        mutates = call.method in _MUTATING_METHODS

        if isinstance(call.obj, Identifier):
            name = call.obj.name
            if name not in self.env:
                raise HexiNameError(f"undefined variable '{name}'")
            receiver = self.env[name]
            if mutates and isinstance(receiver, Collection):
                receiver = receiver.copy()
                result = call_method(receiver, call.method, args)
                self.env[name] = receiver
                return result
            return call_method(receiver, call.method, args)

        # Any other receiver is a temporary; its mutation is dropped.
        receiver = self.evaluate(call.obj)
        if mutates and isinstance(receiver, Collection):
            receiver = receiver.copy()
        return call_method(receiver, call.method, args)


def evaluate(source: str, interpreter: Interpreter | None = None) -> Value:
    """Parse and evaluate a program, returning its last top-level value."""
    runtime = Interpreter() if interpreter is None else interpreter
    results = runtime.run(source)
    if not results:
        return None
    return results[-1]
