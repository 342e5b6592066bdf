"""Tokenization for the hexi scripting language."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_SINGLE_TOKENS = {
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    "[": "LBRACK",
    "]": "RBRACK",
    ",": "COMMA",
    ".": "DOT",
    ";": "SEMI",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "%": "PERCENT",
}

# First character -> (second character, double kind, single kind or None).
# A None single kind means the first character alone is illegal.
_MAYBE_DOUBLE = {
    ":": (":", "DOUBLE_COLON", "COLON"),
    "=": ("=", "EQ", "ASSIGN"),
    "<": ("=", "LE", "LT"),
    ">": ("=", "GE", "GT"),
    "!": ("=", "NE", None),
}

KEYWORDS = {
    "val": "VAL",
    "if": "IF",
    "else": "ELSE",
    "include": "INCLUDE",
}

_QUOTES = {'"', "'"}


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ident_continue(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Lazy token stream over an immutable source buffer.

    The lexer never fails: characters that cannot start a token are dropped,
    so malformed input only surfaces once the parser sees an unexpected
    token. After the end of input every call yields an ``EOF`` token.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.kind == "EOF":
                return

    def _current(self) -> str | None:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def _scan_while(self, predicate) -> str:
        start = self.pos
        while self.pos < len(self.source) and predicate(self.source[self.pos]):
            self.pos += 1
        return self.source[start : self.pos]

    def next_token(self) -> Token:
        while True:
            self._scan_while(str.isspace)
            ch = self._current()
            if ch is None:
                return Token("EOF", "", len(self.source), len(self.source))

            start = self.pos
            if _is_ident_start(ch):
                ident = self._scan_while(_is_ident_continue)
                return Token(KEYWORDS.get(ident, "NAME"), ident, start, self.pos)

            if _is_digit(ch):
                return self._scan_number()

            if ch in _QUOTES:
                return self._scan_string(ch)

            if ch in _SINGLE_TOKENS:
                self.pos += 1
                return Token(_SINGLE_TOKENS[ch], ch, start, self.pos)

            if ch in _MAYBE_DOUBLE:
                second, double_kind, single_kind = _MAYBE_DOUBLE[ch]
                self.pos += 1
                if self._current() == second:
                    self.pos += 1
                    return Token(double_kind, ch + second, start, self.pos)
                if single_kind is not None:
                    return Token(single_kind, ch, start, self.pos)
                continue

            # Illegal character.
            self.pos += 1

    def _scan_number(self) -> Token:
        start = self.pos
        self._scan_while(_is_digit)
        # A dot only belongs to the number when a digit follows it.
        if (
            self._current() == "."
            and self.pos + 1 < len(self.source)
            and _is_digit(self.source[self.pos + 1])
        ):
            self.pos += 1
            self._scan_while(_is_digit)
        return Token("NUMBER", self.source[start : self.pos], start, self.pos)

    def _scan_string(self, quote: str) -> Token:
        start = self.pos
        self.pos += 1
        text = self._scan_while(lambda ch: ch != quote)
        if self._current() == quote:
            self.pos += 1
        return Token("STRING", text, start, self.pos)


def tokenize(source: str) -> list[Token]:
    return list(Lexer(source))
