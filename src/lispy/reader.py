"""Convert lark parse trees into Value trees."""

from __future__ import annotations

from .types import INT64_MAX, INT64_MIN, LError, LNumber, LQExpr, LSExpr, LSymbol, LispyError, Value
from .tree import Node, is_punctuation, is_token, node_contents, tree_children, tree_label

ROOT_LABEL = "lispy"


def read_number(node: Node) -> Value:
    text = node_contents(node)

    try:
        n = int(text, 10)
    except ValueError:
        return LError(f"Invalid number: '{text}'")

    if not INT64_MIN <= n <= INT64_MAX:
        return LError(f"Invalid number: '{text}'")

    return LNumber(n)


def read(node: Node) -> Value:
    label = tree_label(node)

    if label == "number":
        return read_number(node)

    if label == "symbol":
        return LSymbol(node_contents(node))

    if label == "qexpr":
        x: LSExpr | LQExpr = LQExpr()
    elif label in (ROOT_LABEL, "sexpr"):
        x = LSExpr()
    else:
        raise LispyError(f"Cannot read parse node {label or node!r}")

    for child in tree_children(node):
        if is_punctuation(child) or is_token(child):
            continue
        x.cells.append(read(child))

    return x
