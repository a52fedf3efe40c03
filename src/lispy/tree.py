"""Shared helpers for working with the lark Tree/Token nodes the parser yields."""
from __future__ import annotations

from typing import List, Optional, TypeGuard, Union

from lark import Token, Tree
from typing_extensions import TypeAlias

Node: TypeAlias = Union[Tree, Token]

BRACKETS = frozenset({"(", ")", "{", "}"})


def is_tree(node: Node) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Node) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Node) -> Optional[str]:
    return str(node.data) if is_tree(node) else None

def tree_children(node: Node) -> List[Node]:
    if not is_tree(node):
        return []

    return list(node.children)

def node_contents(node: Node) -> str:
    """Literal text of a leaf rule such as ``number`` or ``symbol``."""
    if is_token(node):
        return str(node.value)

    return "".join(node_contents(ch) for ch in tree_children(node))

def is_punctuation(node: Node) -> bool:
    return is_token(node) and str(node.value) in BRACKETS

def pretty(node: Node, indent: str = "") -> List[str]:
    if is_token(node):
        return [f"{indent}{node.type.lower()}  {node.value}"]

    lines = [f"{indent}{tree_label(node)}"]
    for ch in tree_children(node):
        lines.extend(pretty(ch, indent + "  "))
    return lines
