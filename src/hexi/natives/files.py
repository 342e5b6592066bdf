"""The optional ``fs`` module."""

from __future__ import annotations

import logging
from pathlib import Path

from .base import NativeModule, check_arity, check_max_arity, string_arg
from ..errors import HexiRuntimeError

logger = logging.getLogger("hexi.natives.files")


def read_native(args):
    check_max_arity(args, 1, where="fs::read")
    if not args:
        return None

    path = Path(string_arg(args, 0, where="fs::read"))
    logger.debug("Reading %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as err:
        raise HexiRuntimeError(f"fs::read failed to read input: {err}") from err


def write_native(args):
    check_arity(args, 2, where="fs::write")
    path = Path(string_arg(args, 0, where="fs::write"))
    content = string_arg(args, 1, where="fs::write")
    logger.debug("Writing %d characters to %s", len(content), path)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as err:
        raise HexiRuntimeError(f"fs::write failed to write input: {err}") from err
    return True


def exists_native(args):
    check_arity(args, 1, where="fs::exists")
    return Path(string_arg(args, 0, where="fs::exists")).exists()


FS_MODULE = NativeModule(
    name="fs",
    functions=(
        ("read", read_native),
        ("write", write_native),
        ("exists", exists_native),
    ),
)
