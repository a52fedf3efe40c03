"""prompt_toolkit lexer for live Lispy syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from lark import Token
from lark.exceptions import UnexpectedCharacters
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .parser import make_parser
from .runtime import Builtins

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

# Binding forms read as keywords rather than ordinary builtins.
KEYWORDS = frozenset({"def", "=", "\\", "&", "if"})

_TOKEN_GROUP = {
    "NUMBER": "number",
    "COMMENT": "comment",
    "LPAR": "punctuation",
    "RPAR": "punctuation",
    "LBRACE": "punctuation",
    "RBRACE": "punctuation",
}


def _group_for(tok: Token) -> str:
    if tok.type == "SYMBOL":
        if tok.value in KEYWORDS:
            return "keyword"
        if tok.value in Builtins.functions:
            return "function"
        return "identifier"

    return _TOKEN_GROUP.get(tok.type, "")


def highlight_line(text: str) -> StyleAndTextTuples:
    """Style one line of source; unlexable text from the first bad char is an error."""
    result: StyleAndTextTuples = []
    pos = 0

    try:
        for tok in make_parser().lex(text, dont_ignore=True):
            start = tok.start_pos if tok.start_pos is not None else pos
            if start > pos:
                result.append(("", text[pos:start]))
            result.append((GROUP_STYLE.get(_group_for(tok), ""), tok.value))
            pos = start + len(tok.value)
    except UnexpectedCharacters as exc:
        if exc.pos_in_stream > pos:
            result.append(("", text[pos:exc.pos_in_stream]))
        result.append((GROUP_STYLE["error"], text[exc.pos_in_stream:]))
        return result

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class LispyLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lispy source using the lark lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
