from __future__ import annotations

import importlib
from typing import Optional, Tuple

from .types import (
    LNumber, LError, LSymbol, LSExpr, LQExpr, LBuiltin, LLambda,
    Value, ListValue, BuiltinFn, Environment, Builtins,
    LispyError, LispyIndexError, ParseError,
    pop, take, join, copy_value, values_equal, type_name, is_function,
    INT64_MIN, INT64_MAX,
)

_BUILTINS_INITIALIZED = False

def init_builtins() -> None:
    """Load the builtin module (idempotent) so register_builtin hooks run."""
    global _BUILTINS_INITIALIZED

    if _BUILTINS_INITIALIZED:
        return

    importlib.import_module("lispy.builtins")
    _BUILTINS_INITIALIZED = True

def register_builtin(*names: str):
    def dec(fn: BuiltinFn):
        for name in names:
            Builtins.functions[name] = LBuiltin(name=name, fn=fn)
        return fn

    return dec

def make_global_env() -> Environment:
    """Fresh top-level scope with every builtin bound."""
    init_builtins()

    return Environment()

def wrap_int64(n: int) -> int:
    return (n - INT64_MIN) % (2 ** 64) + INT64_MIN

# ---------- Argument guards ----------
# Each guard returns an LError to hand back to the caller, or None when the
# arguments pass.

def expect_count(func: str, args: LSExpr, expected: int) -> Optional[LError]:
    got = len(args.cells)
    if got != expected:
        return LError(
            f"Function '{func}' passed incorrect number of arguments. "
            f"Got {got}, Expected {expected}."
        )
    return None

def expect_type(func: str, args: LSExpr, index: int, expected: Tuple[type, ...] | type) -> Optional[LError]:
    arg = args.cells[index]
    if isinstance(arg, expected):
        return None

    wanted = expected if isinstance(expected, tuple) else (expected,)
    return LError(
        f"Function '{func}' passed incorrect type for argument {index}. "
        f"Got {type_name(arg)}, Expected {_describe(wanted)}."
    )

def expect_nonempty(func: str, args: LSExpr, index: int) -> Optional[LError]:
    arg = args.cells[index]
    if isinstance(arg, (LSExpr, LQExpr)) and not arg.cells:
        return LError(f"Function '{func}' passed {{}} for argument {index}.")
    return None

def _describe(types: Tuple[type, ...]) -> str:
    names = []
    for t in types:
        name = {LNumber: "Number", LSymbol: "Symbol", LQExpr: "Q-Expression",
                LSExpr: "S-Expression", LError: "Error"}.get(t, "Function")
        if name not in names:
            names.append(name)
    return " or ".join(names)

__all__ = [
    "LNumber", "LError", "LSymbol", "LSExpr", "LQExpr", "LBuiltin", "LLambda",
    "Value", "ListValue", "Environment", "Builtins",
    "LispyError", "LispyIndexError", "ParseError",
    "pop", "take", "join", "copy_value", "values_equal", "type_name", "is_function",
    "init_builtins", "register_builtin", "make_global_env", "wrap_int64",
    "expect_count", "expect_type", "expect_nonempty",
]
