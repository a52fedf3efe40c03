"""Lispy: a small S-expression language with closures, currying and variadic lambdas."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "evaluator",
    "parser",
    "reader",
    "runner",
    "runtime",
    "types",
]
