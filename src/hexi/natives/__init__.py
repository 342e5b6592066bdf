"""Native module registry.

Two static tables: modules loaded when an interpreter is constructed and
modules loaded on ``include``.
"""

from __future__ import annotations

from .base import NativeFunction, NativeModule
from .console import IO_MODULE
from .files import FS_MODULE
from .jsondata import JSON_MODULE
from .numeric import MATH_MODULE
from .text import STRING_MODULE

STANDARD_MODULES: tuple[NativeModule, ...] = (
    IO_MODULE,
    MATH_MODULE,
    STRING_MODULE,
)

OPTIONAL_MODULES: tuple[NativeModule, ...] = (
    FS_MODULE,
    JSON_MODULE,
)


def find_optional_module(name: str) -> NativeModule | None:
    return next((module for module in OPTIONAL_MODULES if module.name == name), None)


__all__ = [
    "NativeFunction",
    "NativeModule",
    "STANDARD_MODULES",
    "OPTIONAL_MODULES",
    "find_optional_module",
]
