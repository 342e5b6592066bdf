"""Run a ``.hx`` file or an interactive session."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from . import __version__
from .errors import HexiParseError, HexiRuntimeError
from .evaluator import Interpreter
from .parser import parse_program
from .values import format_value

logger = logging.getLogger("hexi.cli")

SOURCE_SUFFIX = ".hx"


def execute(interpreter: Interpreter, code: str, *, out: TextIO | None = None) -> bool:
    """Run ``code`` and print every non-nil result; False once an error was reported."""
    out = sys.stdout if out is None else out
    try:
        program = parse_program(code)
    except HexiParseError as err:
        print(f"parser error: {err}", file=out)
        return False

    for expr in program.expressions:
        try:
            result = interpreter.evaluate_statement(expr)
        except HexiRuntimeError as err:
            print(f"runtime error: {err}", file=out)
            return False
        if result is not None:
            print(format_value(result), file=out)
    return True


def run_file(filename: str, *, out: TextIO | None = None) -> int:
    path = Path(filename)
    if path.suffix != SOURCE_SUFFIX:
        print(f"[hexi::error] file must have {SOURCE_SUFFIX} extension", file=sys.stderr)
        return 1

    try:
        source = path.read_text(encoding="utf-8")
    except OSError as err:
        print(f"[hexi::error] reading file '{filename}': {err}", file=sys.stderr)
        return 1

    logger.debug("Running %s (%d characters)", path, len(source))
    return 0 if execute(Interpreter(), source, out=out) else 1


def run_repl(*, stdin: TextIO | None = None, out: TextIO | None = None) -> int:
    stdin = sys.stdin if stdin is None else stdin
    out = sys.stdout if out is None else out
    interpreter = Interpreter()

    print(f"hexi {__version__}. enter 'exit' or 'quit' to leave.", file=out)
    while True:
        out.write(">> ")
        out.flush()
        line = stdin.readline()
        if not line:
            out.write("\n")
            break

        line = line.strip()
        if line in {"exit", "quit"}:
            print("bye :3", file=out)
            break
        if not line:
            continue
        execute(interpreter, line, out=out)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="hexi", description=__doc__)
    parser.add_argument("file", nargs="?", help=f"source file to run (must end in {SOURCE_SUFFIX})")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity for interpreter diagnostics",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.file is not None:
        return run_file(args.file)
    return run_repl()


if __name__ == "__main__":
    raise SystemExit(main())
