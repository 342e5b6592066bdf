"""AST nodes for the hexi scripting language.

Every construct is an expression. Nodes are immutable and own their
children outright, so the tree is acyclic and never shares subtrees.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple["Expr", ...]
    module: str | None = None

    @property
    def signature(self) -> str:
        if self.module is None:
            return self.name
        return f"{self.module}_{self.name}"


@dataclass(frozen=True)
class VarDecl:
    name: str
    value: "Expr"


@dataclass(frozen=True)
class Assignment:
    name: str
    value: "Expr"


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: "Expr"


@dataclass(frozen=True)
class Block:
    exprs: tuple["Expr", ...]


@dataclass(frozen=True)
class If:
    condition: "Expr"
    then_block: Block
    else_block: Block | None = None


@dataclass(frozen=True)
class PositionalEntry:
    value: "Expr"


@dataclass(frozen=True)
class KeyedEntry:
    key: str
    value: "Expr"


@dataclass(frozen=True)
class NumberKeyedEntry:
    key: float
    value: "Expr"


@dataclass(frozen=True)
class CollectionLiteral:
    entries: tuple["CollectionEntry", ...]


@dataclass(frozen=True)
class IndexAccess:
    obj: "Expr"
    index: "Expr"


@dataclass(frozen=True)
class MethodCall:
    obj: "Expr"
    method: str
    args: tuple["Expr", ...]


@dataclass(frozen=True)
class FieldAccess:
    obj: "Expr"
    field: str


@dataclass(frozen=True)
class Include:
    module: str


@dataclass(frozen=True)
class Program:
    expressions: tuple["Expr", ...]


CollectionEntry = Union[PositionalEntry, KeyedEntry, NumberKeyedEntry]
Expr = Union[
    Identifier,
    Number,
    String,
    Call,
    VarDecl,
    Assignment,
    BinaryOp,
    UnaryOp,
    Block,
    If,
    CollectionLiteral,
    IndexAccess,
    MethodCall,
    FieldAccess,
    Include,
]
