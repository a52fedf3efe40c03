from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .evaluator import eval_value
from .parser import bracket_depth, has_forms, parse
from .reader import read
from .runtime import Environment, ParseError, Value, make_global_env
from .tree import pretty
from .utils import configure_logging, raise_recursion_limit

logger = logging.getLogger(__name__)

def repl_eval(text: str, env: Environment) -> Value:
    """Parse, read and evaluate one input against *env*.

    Raises ParseError for malformed input; evaluation failures come back as
    LError values.
    """
    tree = parse(text)
    return eval_value(env, read(tree))

def run(src: str, env: Optional[Environment]=None) -> Value:
    return repl_eval(src, env if env is not None else make_global_env())

def rep(line: str, env: Environment) -> str:
    """One read-eval-print cycle rendered as a single line of output."""
    try:
        result = repl_eval(line, env)
    except ParseError as exc:
        return f"Parse error: {exc}"
    except RecursionError:
        logger.debug("recursion limit hit evaluating %r", line)
        return "Error: Maximum recursion depth exceeded!"

    return repr(result)

def split_inputs(lines: Iterable[str]) -> Iterator[str]:
    """
    Group source lines into REPL inputs.
    - Lines are joined while brackets stay open.
    - Blank and comment-only lines between inputs are dropped.
    - An input still open at the end is yielded as is.
    """
    pending: list[str] = []
    depth = 0

    for line in lines:
        if not pending and not has_forms(line):
            continue

        pending.append(line)
        depth += bracket_depth(line)
        if depth > 0:
            continue

        yield "\n".join(pending)
        pending, depth = [], 0

    if pending:
        yield "\n".join(pending)

def run_lines(lines: Iterable[str], env: Optional[Environment]=None) -> Iterator[str]:
    env = env if env is not None else make_global_env()

    for text in split_inputs(lines):
        yield rep(text, env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Existing path => read file contents.
    """

    if arg == "-":
        return sys.stdin.read()

    candidate = Path(arg) if arg else None
    if candidate is None or not candidate.exists():
        raise SystemExit(f"No such file: {arg}")

    return candidate.read_text(encoding="utf-8")

def main(argv: Optional[list[str]]=None) -> None:
    ap = argparse.ArgumentParser(prog="lispy", description="Lispy interpreter")
    ap.add_argument("source", nargs="?", help="Path to a source file, or - for stdin (starts the REPL when omitted)")
    ap.add_argument("-c", "--command", help="Evaluate the given source text, one result per input")
    ap.add_argument("--tree", action="store_true", help="Print the parse tree instead of evaluating")
    args = ap.parse_args(argv)

    configure_logging()
    raise_recursion_limit()

    if args.command is None and args.source is None:
        from .repl import repl
        repl()
        return

    src = args.command if args.command is not None else _load_source(args.source)

    if args.tree:
        try:
            print("\n".join(pretty(parse(src))))
        except ParseError as exc:
            sys.stderr.write(f"Parse error: {exc}\n")
            sys.exit(1)
        return

    for out in run_lines(src.splitlines()):
        print(out)

if __name__ == "__main__":
    main()
