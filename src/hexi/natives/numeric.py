"""The ``math`` module, computed on float64 scalars with jax.numpy."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Callable, Final

import jax
import jax.numpy as jnp
from jax.experimental import enable_x64

from .base import NativeModule, check_arity, number_arg

_USE_JITTED_KERNELS: Final[bool] = os.environ.get("HEXI_DISABLE_JITTED_MATH", "0") != "1"

_UNARY_KERNELS: Final[dict[str, Callable]] = {
    "abs": jnp.abs,
    "sqrt": jnp.sqrt,
    "floor": jnp.floor,
    "ceil": jnp.ceil,
    "sin": jnp.sin,
    "cos": jnp.cos,
}
_BINARY_KERNELS: Final[dict[str, Callable]] = {
    "pow": jnp.power,
    "max": jnp.maximum,
    "min": jnp.minimum,
}


@lru_cache(maxsize=None)
def _kernel(name: str) -> Callable:
    fn = _UNARY_KERNELS[name] if name in _UNARY_KERNELS else _BINARY_KERNELS[name]
    if _USE_JITTED_KERNELS:
        return jax.jit(fn)
    return fn


def apply_kernel(name: str, *operands: float) -> float:
    # Float64 is scoped to the call; the process-wide jax config is left as is.
    with enable_x64():
        arrays = [jnp.asarray(operand, dtype=jnp.float64) for operand in operands]
        return float(_kernel(name)(*arrays))


def _native(name: str, arity: int):
    where = f"math::{name}"

    def native(args):
        check_arity(args, arity, where=where)
        return apply_kernel(name, *(number_arg(args, i, where=where) for i in range(arity)))

    native.__name__ = f"{name}_native"
    return native


MATH_MODULE = NativeModule(
    name="math",
    functions=tuple((name, _native(name, 1)) for name in _UNARY_KERNELS)
    + tuple((name, _native(name, 2)) for name in _BINARY_KERNELS),
    constants=(
        ("pi", float(jnp.pi)),
        ("e", float(jnp.e)),
    ),
)
