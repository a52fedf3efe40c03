from __future__ import annotations

import pytest

from lispy.runtime import Environment, make_global_env
from lispy.utils import DEBUG_PY_TRACE_VAR, LOG_LEVEL_VAR, RECURSION_LIMIT_VAR


@pytest.fixture(autouse=True)
def _clean_lispy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep LISPY_* settings from the calling shell out of every test."""
    for name in (DEBUG_PY_TRACE_VAR, LOG_LEVEL_VAR, RECURSION_LIMIT_VAR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def global_env() -> Environment:
    """A fresh root scope with every builtin bound."""
    return make_global_env()
