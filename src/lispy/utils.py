from __future__ import annotations

import logging
import os
import sys

DEBUG_PY_TRACE_VAR = "LISPY_DEBUG_PY_TRACE"
LOG_LEVEL_VAR = "LISPY_LOG_LEVEL"
RECURSION_LIMIT_VAR = "LISPY_RECURSION_LIMIT"

DEFAULT_RECURSION_LIMIT = 10000

_TRUTHY = {"1", "true", "yes", "on"}


def debug_py_trace_enabled() -> bool:
    """Check whether Python tracebacks should accompany REPL errors."""
    return os.environ.get(DEBUG_PY_TRACE_VAR, "").strip().lower() in _TRUTHY


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_VAR] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_VAR, None)


def log_level() -> int:
    raw = os.environ.get(LOG_LEVEL_VAR, "").strip().upper()
    if not raw:
        return logging.WARNING

    level = logging.getLevelName(raw)
    # getLevelName returns "Level X" for names it does not know.
    return level if isinstance(level, int) else logging.WARNING


def configure_logging() -> logging.Logger:
    """Attach a stderr handler to the package logger (idempotent)."""
    logger = logging.getLogger("lispy")
    logger.setLevel(log_level())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger


def recursion_limit() -> int:
    raw = os.environ.get(RECURSION_LIMIT_VAR, "").strip()
    try:
        limit = int(raw) if raw else DEFAULT_RECURSION_LIMIT
    except ValueError:
        return DEFAULT_RECURSION_LIMIT

    return limit if limit > 0 else DEFAULT_RECURSION_LIMIT


def raise_recursion_limit() -> int:
    """Lift the interpreter's recursion limit so nested lambdas can run deep.

    Never lowers an existing limit. Returns the limit now in effect.
    """
    limit = max(sys.getrecursionlimit(), recursion_limit())
    sys.setrecursionlimit(limit)
    return limit
