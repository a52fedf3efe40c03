from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from lark import Lark, Tree, UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .types import ParseError

logger = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).resolve().parent / "grammar.lark"

def _read_grammar(grammar_path: Optional[str]) -> str:
    p = Path(grammar_path) if grammar_path else GRAMMAR_PATH
    if not p.exists():
        raise FileNotFoundError(f"grammar not found: {p}")

    return p.read_text(encoding="utf-8")

@lru_cache(maxsize=None)
def make_parser(grammar_path: Optional[str]=None) -> Lark:
    return Lark(
        _read_grammar(grammar_path),
        start="lispy",
        parser="lalr",
        keep_all_tokens=True,
        propagate_positions=True,
    )

def _describe(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedEOF):
        return "Unexpected end of input"

    if isinstance(exc, UnexpectedCharacters):
        return f"Unexpected character {exc.char!r}"

    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "Unexpected end of input"
        return f"Unexpected token {exc.token.value!r}"

    return "Invalid input"

def parse(src: str, grammar_path: Optional[str]=None) -> Tree:
    """Parse *src* into a lark tree rooted at ``lispy``."""
    parser = make_parser(grammar_path)

    try:
        return parser.parse(src)
    except UnexpectedInput as exc:
        logger.debug("parse failure in %r: %s", src, exc)
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        if line is not None and line < 0:
            line, column = None, None
        raise ParseError(_describe(exc), line, column) from exc

def bracket_depth(text: str, grammar_path: Optional[str]=None) -> int:
    """Net count of open brackets in *text*; negative when over-closed."""
    depth = 0

    try:
        for tok in make_parser(grammar_path).lex(text):
            if tok.type in ("LPAR", "LBRACE"):
                depth += 1
            elif tok.type in ("RPAR", "RBRACE"):
                depth -= 1
    except UnexpectedCharacters:
        return 0

    return depth

def has_forms(text: str, grammar_path: Optional[str]=None) -> bool:
    """False when *text* holds only whitespace and comments."""
    try:
        return any(True for _ in make_parser(grammar_path).lex(text))
    except UnexpectedCharacters:
        return True
