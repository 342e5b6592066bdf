"""hexi public API."""

import logging

from .errors import (
    HexiArithmeticError,
    HexiError,
    HexiIndexError,
    HexiNameError,
    HexiParseError,
    HexiRuntimeError,
    HexiTypeError,
)
from .lexer import Lexer, Token, tokenize
from .parser import parse, parse_program
from .values import Collection, format_value

try:
    from .evaluator import Environment, Interpreter, evaluate
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def evaluate(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for evaluate(). Install runtime deps first."
            ) from _jax_import_error

        class Interpreter:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for Interpreter(). Install runtime deps first."
                ) from _jax_import_error

        class Environment:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for Environment(). Install runtime deps first."
                ) from _jax_import_error

    else:
        raise

logging.getLogger("hexi").addHandler(logging.NullHandler())

__version__ = "0.2.4"

__all__ = [
    "tokenize",
    "Lexer",
    "Token",
    "parse",
    "parse_program",
    "evaluate",
    "Interpreter",
    "Environment",
    "Collection",
    "format_value",
    "HexiError",
    "HexiParseError",
    "HexiRuntimeError",
    "HexiNameError",
    "HexiTypeError",
    "HexiArithmeticError",
    "HexiIndexError",
]
