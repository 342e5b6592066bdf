"""Recursive-descent parser for the hexi scripting language."""

from __future__ import annotations

from .ast import (
    Assignment,
    BinaryOp,
    Block,
    Call,
    CollectionEntry,
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
from .errors import HexiParseError
from .lexer import Lexer, Token

# Binary operator tiers, low to high.
_PRECEDENCE = {
    "EQ": 1,
    "LT": 1,
    "GT": 1,
    "LE": 1,
    "GE": 1,
    "NE": 1,
    "PLUS": 2,
    "MINUS": 2,
    "STAR": 3,
    "SLASH": 3,
    "PERCENT": 3,
}
_LOWEST_PRECEDENCE = 1

_EXPR_START = ("INCLUDE", "MINUS", "VAL", "NAME", "STRING", "NUMBER", "LPAREN", "LBRACK", "LBRACE", "IF")


class _Parser:
    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.current = lexer.next_token()

    def parse_program(self) -> Program:
        expressions: list[Expr] = []
        self._consume_semicolons()
        while self._peek().kind != "EOF":
            expressions.append(self.parse_expression())
            self._consume_semicolons()
        return Program(expressions=tuple(expressions))

    def parse_expression_only(self) -> Expr:
        expr = self.parse_expression()
        self._consume_semicolons()
        self._expect("EOF")
        return expr

    def parse_expression(self) -> Expr:
        return self._parse_binary(_LOWEST_PRECEDENCE)

    def _peek(self) -> Token:
        return self.current

    def _advance(self) -> Token:
        tok = self.current
        self.current = self.lexer.next_token()
        return tok

    def _expect(self, kind: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            self._error(tok, expected=(kind,))
        return self._advance()

    def _match(self, kind: str) -> bool:
        if self._peek().kind == kind:
            self._advance()
            return True
        return False

    def _error(self, tok: Token | None = None, *, message: str | None = None, expected: tuple[str, ...] = ()) -> None:
        token = tok if tok is not None else self._peek()
        if token.kind == "EOF":
            detail = message if message is not None else "Unexpected end of input"
            found = "EOF"
        else:
            detail = message if message is not None else "Unexpected token"
            found = f"{token.kind}({token.text})" if token.text else token.kind
        raise HexiParseError(detail, token.pos, token.end, expected=tuple(dict.fromkeys(expected)), found=found)

    def _consume_semicolons(self) -> None:
        while self._peek().kind == "SEMI":
            self._advance()

    def _parse_binary(self, min_prec: int, left: Expr | None = None) -> Expr:
        if left is None:
            left = self._parse_postfix(self._parse_primary())

        while True:
            tok = self._peek()
            prec = _PRECEDENCE.get(tok.kind)
            if prec is None or prec < min_prec:
                break
            self._advance()
            # Parsing the right side one tier up keeps each tier left-associative.
            right = self._parse_binary(prec + 1)
            left = BinaryOp(op=tok.text, left=left, right=right)

        return left

    def _parse_primary(self) -> Expr:
        tok = self._peek()
        kind = tok.kind

        if kind == "INCLUDE":
            self._advance()
            name = self._expect("NAME")
            return Include(module=name.text)

        if kind == "MINUS":
            self._advance()
            operand = self._parse_postfix(self._parse_primary())
            return UnaryOp(op=tok.text, operand=operand)

        if kind == "VAL":
            self._advance()
            name = self._expect("NAME")
            self._expect("ASSIGN")
            return VarDecl(name=name.text, value=self.parse_expression())

        if kind == "NAME":
            self._advance()
            return self._parse_identifier_tail(tok)

        if kind == "STRING":
            self._advance()
            return String(value=tok.text)

        if kind == "NUMBER":
            self._advance()
            return Number(value=float(tok.text))

        if kind == "LPAREN":
            self._advance()
            expr = self.parse_expression()
            self._expect("RPAREN")
            return expr

        if kind == "LBRACK":
            return self._parse_collection()

        if kind == "LBRACE":
            return self._parse_block()

        if kind == "IF":
            return self._parse_if()

        self._error(tok, expected=_EXPR_START)
        raise AssertionError("unreachable")

    def _parse_identifier_tail(self, name_tok: Token) -> Expr:
        name = name_tok.text
        kind = self._peek().kind

        if kind == "LPAREN":
            return Call(name=name, args=self._parse_args())

        if kind == "DOUBLE_COLON":
            self._advance()
            member = self._expect("NAME").text
            if self._peek().kind == "LPAREN":
                return Call(name=member, args=self._parse_args(), module=name)
            return Identifier(name=f"{name}::{member}")

        if kind == "ASSIGN":
            self._advance()
            return Assignment(name=name, value=self.parse_expression())

        return Identifier(name=name)

    def _parse_args(self) -> tuple[Expr, ...]:
        self._expect("LPAREN")
        args: list[Expr] = []
        while self._peek().kind != "RPAREN":
            args.append(self.parse_expression())
            if not self._match("COMMA"):
                break
        self._expect("RPAREN")
        return tuple(args)

    def _parse_postfix(self, expr: Expr) -> Expr:
        while True:
            if self._match("LBRACK"):
                index = self.parse_expression()
                self._expect("RBRACK")
                expr = IndexAccess(obj=expr, index=index)
                continue

            if self._match("DOT"):
                member = self._expect("NAME").text
                if self._peek().kind == "LPAREN":
                    expr = MethodCall(obj=expr, method=member, args=self._parse_args())
                else:
                    expr = FieldAccess(obj=expr, field=member)
                continue

            return expr

    def _parse_collection(self) -> CollectionLiteral:
        self._expect("LBRACK")
        entries: list[CollectionEntry] = []
        while self._peek().kind != "RBRACK":
            entries.append(self._parse_collection_entry())
            if not self._match("COMMA"):
                break
        self._expect("RBRACK")
        return CollectionLiteral(entries=tuple(entries))

    def _parse_collection_entry(self) -> CollectionEntry:
        tok = self._peek()

        if tok.kind == "NAME":
            # `name = value` is a keyed entry, anything else an expression led by the name.
            self._advance()
            if self._match("ASSIGN"):
                return KeyedEntry(key=tok.text, value=self.parse_expression())
            led = self._parse_postfix(self._parse_identifier_tail(tok))
            return PositionalEntry(value=self._parse_binary(_LOWEST_PRECEDENCE, left=led))

        expr = self.parse_expression()
        if self._peek().kind != "ASSIGN":
            return PositionalEntry(value=expr)

        eq_tok = self._advance()
        if isinstance(expr, String):
            return KeyedEntry(key=expr.value, value=self.parse_expression())
        if isinstance(expr, Number):
            return NumberKeyedEntry(key=expr.value, value=self.parse_expression())
        self._error(eq_tok, message="Invalid collection key; keys must be names, strings or numbers")
        raise AssertionError("unreachable")

    def _parse_block(self) -> Block:
        self._expect("LBRACE")
        exprs: list[Expr] = []
        self._consume_semicolons()
        while self._peek().kind not in {"RBRACE", "EOF"}:
            exprs.append(self.parse_expression())
            self._consume_semicolons()
        self._expect("RBRACE")
        return Block(exprs=tuple(exprs))

    def _parse_if(self) -> If:
        self._expect("IF")
        condition = self.parse_expression()
        then_block = self._parse_block()
        else_block: Block | None = None
        if self._match("ELSE"):
            if self._peek().kind == "IF":
                else_block = Block(exprs=(self._parse_if(),))
            else:
                else_block = self._parse_block()
        return If(condition=condition, then_block=then_block, else_block=else_block)


def _nesting_error(parser: _Parser) -> HexiParseError:
    tok = parser._peek()
    return HexiParseError("Expression nesting too deep", tok.pos, tok.end)


def parse(source: str) -> Expr:
    """Parse exactly one expression (optionally followed by semicolons)."""
    parser = _Parser(Lexer(source))
    try:
        return parser.parse_expression_only()
    except RecursionError:
        raise _nesting_error(parser) from None


def parse_program(source: str) -> Program:
    parser = _Parser(Lexer(source))
    try:
        return parser.parse_program()
    except RecursionError:
        raise _nesting_error(parser) from None
