"""Reduction of Value trees against an Environment.

Evaluation consumes its input: S-expressions are reduced in place and the
caller must not reuse the Value it passed in. Language-level failures are
returned as ``LError`` values, never raised.
"""

from __future__ import annotations

import logging

from .runtime import (
    Environment,
    LBuiltin,
    LError,
    LLambda,
    LQExpr,
    LSExpr,
    LSymbol,
    Value,
    copy_value,
    is_function,
    pop,
    take,
    type_name,
)

logger = logging.getLogger(__name__)

VARIADIC_MARKER = "&"


def eval_value(env: Environment, v: Value) -> Value:
    if isinstance(v, LSymbol):
        return env.get(v.name)

    if isinstance(v, LSExpr):
        return eval_sexpr(env, v)

    return v


def eval_sexpr(env: Environment, v: LSExpr) -> Value:
    v.cells = [eval_value(env, cell) for cell in v.cells]

    for i, cell in enumerate(v.cells):
        if isinstance(cell, LError):
            return take(v, i)

    if not v.cells:
        return v

    if len(v.cells) == 1:
        return take(v, 0)

    f = pop(v, 0)
    if not is_function(f):
        return LError(
            "S-expression starts with incorrect type! "
            f"Got {type_name(f)}, Expected Function."
        )

    return call(env, f, v)


def call(env: Environment, f: LBuiltin | LLambda, args: LSExpr) -> Value:
    """Apply a function value to an evaluated argument list."""
    if isinstance(f, LBuiltin):
        return f.fn(env, args)

    return _call_lambda(copy_value(f), args)


def _call_lambda(f: LLambda, args: LSExpr) -> Value:
    given = len(args.cells)
    total = len(f.formals.cells)

    while args.cells:
        if not f.formals.cells:
            return LError(
                "Function passed too many arguments. "
                f"Got {given}, Expected {total}."
            )

        sym = pop(f.formals, 0)
        assert isinstance(sym, LSymbol)

        if sym.name == VARIADIC_MARKER:
            if len(f.formals.cells) != 1:
                return _variadic_format_error()

            rest = pop(f.formals, 0)
            assert isinstance(rest, LSymbol)
            f.env.put(rest.name, LQExpr(args.cells))
            args.cells = []
            break

        f.env.put(sym.name, pop(args, 0))

    formals = f.formals.cells
    if formals and isinstance(formals[0], LSymbol) and formals[0].name == VARIADIC_MARKER:
        if len(formals) != 2:
            return _variadic_format_error()

        pop(f.formals, 0)
        rest = pop(f.formals, 0)
        assert isinstance(rest, LSymbol)
        f.env.put(rest.name, LQExpr())

    if f.formals.cells:
        logger.debug("partial application: %d of %d formals bound", total - len(f.formals.cells), total)
        return f

    logger.debug("applying lambda body %r to %d argument(s)", f.body, given)

    return eval_sexpr(f.env, LSExpr(f.body.cells))


def _variadic_format_error() -> LError:
    return LError(
        "Function format invalid. "
        f"Symbol '{VARIADIC_MARKER}' not followed by single symbol."
    )
