"""Builtin functions registered via lispy.runtime."""

from __future__ import annotations

from typing import Callable, Dict

from .runtime import (
    register_builtin,
    expect_count,
    expect_nonempty,
    expect_type,
    wrap_int64,
    Environment,
    LError,
    LLambda,
    LNumber,
    LQExpr,
    LSExpr,
    LSymbol,
    Value,
    join,
    pop,
    take,
    type_name,
    values_equal,
)
from .evaluator import eval_sexpr

# ---------- List manipulation ----------

@register_builtin("list")
def builtin_list(_env: Environment, args: LSExpr) -> Value:
    return LQExpr(args.cells)

@register_builtin("head")
def builtin_head(_env: Environment, args: LSExpr) -> Value:
    err = (
        expect_count("head", args, 1)
        or expect_type("head", args, 0, LQExpr)
        or expect_nonempty("head", args, 0)
    )
    if err:
        return err

    v = take(args, 0)
    assert isinstance(v, LQExpr)
    del v.cells[1:]

    return v

@register_builtin("tail")
def builtin_tail(_env: Environment, args: LSExpr) -> Value:
    err = (
        expect_count("tail", args, 1)
        or expect_type("tail", args, 0, LQExpr)
        or expect_nonempty("tail", args, 0)
    )
    if err:
        return err

    v = take(args, 0)
    assert isinstance(v, LQExpr)
    pop(v, 0)

    return v

@register_builtin("eval")
def builtin_eval(env: Environment, args: LSExpr) -> Value:
    err = expect_count("eval", args, 1) or expect_type("eval", args, 0, LQExpr)
    if err:
        return err

    x = take(args, 0)
    assert isinstance(x, LQExpr)

    return eval_sexpr(env, LSExpr(x.cells))

@register_builtin("join")
def builtin_join(_env: Environment, args: LSExpr) -> Value:
    if not args.cells:
        return LError("Function 'join' passed no arguments!")

    for i in range(len(args.cells)):
        err = expect_type("join", args, i, LQExpr)
        if err:
            return err

    x = pop(args, 0)
    assert isinstance(x, LQExpr)

    while args.cells:
        y = pop(args, 0)
        assert isinstance(y, LQExpr)
        join(x, y)

    return x

# ---------- Arithmetic ----------

def _c_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

def _c_mod(a: int, b: int) -> int:
    return a - b * _c_div(a, b)

_ARITH_OPS: Dict[str, Callable[[int, int], int]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _c_div,
    "%": _c_mod,
}

def builtin_op(args: LSExpr, op: str) -> Value:
    if not args.cells:
        return LError(f"Function '{op}' passed no arguments!")

    for i, cell in enumerate(args.cells):
        if not isinstance(cell, LNumber):
            return LError(
                f"Function '{op}' passed incorrect type for argument {i}. "
                f"Got {type_name(cell)}, Expected Number."
            )

    x = pop(args, 0)
    assert isinstance(x, LNumber)

    if op == "-" and not args.cells:
        x.value = wrap_int64(-x.value)

    apply = _ARITH_OPS[op]

    while args.cells:
        y = pop(args, 0)
        assert isinstance(y, LNumber)

        if op in ("/", "%") and y.value == 0:
            return LError("Division by zero!")
        x.value = wrap_int64(apply(x.value, y.value))

    return x

@register_builtin("+")
def builtin_add(_env: Environment, args: LSExpr) -> Value:
    return builtin_op(args, "+")

@register_builtin("-")
def builtin_sub(_env: Environment, args: LSExpr) -> Value:
    return builtin_op(args, "-")

@register_builtin("*")
def builtin_mul(_env: Environment, args: LSExpr) -> Value:
    return builtin_op(args, "*")

@register_builtin("/")
def builtin_div(_env: Environment, args: LSExpr) -> Value:
    return builtin_op(args, "/")

@register_builtin("%")
def builtin_mod(_env: Environment, args: LSExpr) -> Value:
    return builtin_op(args, "%")

# ---------- Comparison ----------

_ORD_OPS: Dict[str, Callable[[int, int], bool]] = {
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
    ">=": lambda a, b: a >= b,
    "<=": lambda a, b: a <= b,
}

def builtin_ord(args: LSExpr, op: str) -> Value:
    err = (
        expect_count(op, args, 2)
        or expect_type(op, args, 0, LNumber)
        or expect_type(op, args, 1, LNumber)
    )
    if err:
        return err

    a, b = args.cells
    assert isinstance(a, LNumber) and isinstance(b, LNumber)

    return LNumber(int(_ORD_OPS[op](a.value, b.value)))

@register_builtin(">")
def builtin_gt(_env: Environment, args: LSExpr) -> Value:
    return builtin_ord(args, ">")

@register_builtin("<")
def builtin_lt(_env: Environment, args: LSExpr) -> Value:
    return builtin_ord(args, "<")

@register_builtin(">=")
def builtin_ge(_env: Environment, args: LSExpr) -> Value:
    return builtin_ord(args, ">=")

@register_builtin("<=")
def builtin_le(_env: Environment, args: LSExpr) -> Value:
    return builtin_ord(args, "<=")

def builtin_cmp(args: LSExpr, op: str) -> Value:
    err = expect_count(op, args, 2)
    if err:
        return err

    same = values_equal(args.cells[0], args.cells[1])

    return LNumber(int(same if op == "==" else not same))

@register_builtin("==")
def builtin_eq(_env: Environment, args: LSExpr) -> Value:
    return builtin_cmp(args, "==")

@register_builtin("!=")
def builtin_ne(_env: Environment, args: LSExpr) -> Value:
    return builtin_cmp(args, "!=")

@register_builtin("if")
def builtin_if(env: Environment, args: LSExpr) -> Value:
    err = (
        expect_count("if", args, 3)
        or expect_type("if", args, 0, LNumber)
        or expect_type("if", args, 1, LQExpr)
        or expect_type("if", args, 2, LQExpr)
    )
    if err:
        return err

    cond = pop(args, 0)
    assert isinstance(cond, LNumber)
    branch = take(args, 0 if cond.value else 1)
    assert isinstance(branch, LQExpr)

    return eval_sexpr(env, LSExpr(branch.cells))

# ---------- Binding ----------

def builtin_var(env: Environment, args: LSExpr, func: str) -> Value:
    if not args.cells:
        return LError(f"Function '{func}' passed no arguments!")

    err = expect_type(func, args, 0, LQExpr)
    if err:
        return err

    syms = args.cells[0]
    assert isinstance(syms, LQExpr)

    for sym in syms.cells:
        if not isinstance(sym, LSymbol):
            return LError(
                f"Function '{func}' cannot define non-symbol. "
                f"Got {type_name(sym)}, Expected Symbol."
            )

    values = args.cells[1:]
    if len(syms.cells) != len(values):
        return LError(
            f"Function '{func}' passed incorrect number of values for symbols. "
            f"Got {len(values)}, Expected {len(syms.cells)}."
        )

    for sym, val in zip(syms.cells, values):
        assert isinstance(sym, LSymbol)
        if func == "def":
            env.define(sym.name, val)
        else:
            env.put(sym.name, val)

    return LSExpr()

@register_builtin("def")
def builtin_def(env: Environment, args: LSExpr) -> Value:
    return builtin_var(env, args, "def")

@register_builtin("=")
def builtin_put(env: Environment, args: LSExpr) -> Value:
    return builtin_var(env, args, "=")

@register_builtin("\\")
def builtin_lambda(env: Environment, args: LSExpr) -> Value:
    err = (
        expect_count("\\", args, 2)
        or expect_type("\\", args, 0, LQExpr)
        or expect_type("\\", args, 1, LQExpr)
    )
    if err:
        return err

    formals, body = args.cells
    assert isinstance(formals, LQExpr) and isinstance(body, LQExpr)

    for sym in formals.cells:
        if not isinstance(sym, LSymbol):
            return LError(
                f"Cannot define non-symbol. Got {type_name(sym)}, Expected Symbol."
            )

    return LLambda(formals=formals, body=body, env=Environment(parent=env))

# ---------- Output ----------

@register_builtin("print")
def builtin_print(_env: Environment, args: LSExpr) -> Value:
    print(*(repr(cell) for cell in args.cells))

    return LSExpr()
