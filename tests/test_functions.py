from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_case

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            (add 10 20)
        """
        ),
        "30",
        id="lambda-call",
    ),
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            ((add 1) 2)
        """
        ),
        "3",
        id="curried-call",
    ),
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            (def {inc} (add 1))
            (inc 41)
        """
        ),
        "42",
        id="curried-definition",
    ),
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            (add 1)
        """
        ),
        "(\\ {b} {+ a b})",
        id="partial-renders-remaining-formals",
    ),
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            (def {inc} (add 1))
            (inc 1)
            (inc 5)
        """
        ),
        "6",
        id="partial-is-reusable",
    ),
    pytest.param(
        dedent(
            """\
            (def {f} (\\ {a & rest} {rest}))
            (f 1 2 3)
        """
        ),
        "{2 3}",
        id="variadic-rest",
    ),
    pytest.param(
        dedent(
            """\
            (def {f} (\\ {a & rest} {rest}))
            (f 1)
        """
        ),
        "{}",
        id="variadic-empty-rest",
    ),
    pytest.param(
        dedent(
            """\
            (def {f} (\\ {& xs} {join xs {done}}))
            (f 1 2)
        """
        ),
        "{1 2 done}",
        id="variadic-only",
    ),
    pytest.param(
        dedent(
            """\
            (def {f} (\\ {a & b c} {a}))
            (f 1 2)
        """
        ),
        "Error: Function format invalid. Symbol '&' not followed by single symbol.",
        id="variadic-bad-format",
    ),
    pytest.param(
        dedent(
            """\
            (def {f} (\\ {a &} {a}))
            (f 1)
        """
        ),
        "Error: Function format invalid. Symbol '&' not followed by single symbol.",
        id="variadic-marker-last",
    ),
    pytest.param(
        dedent(
            """\
            (def {add} (\\ {a b} {+ a b}))
            (add 1 2 3)
        """
        ),
        "Error: Function passed too many arguments. Got 3, Expected 2.",
        id="too-many-arguments",
    ),
    pytest.param(
        dedent(
            """\
            (def {make-adder} (\\ {n} {\\ {x} {+ x n}}))
            (def {add5} (make-adder 5))
            (add5 10)
        """
        ),
        "15",
        id="closure-captures-argument",
    ),
    pytest.param(
        dedent(
            """\
            (def {fact} (\\ {n} {if (<= n 1) {1} {* n (fact (- n 1))}}))
            (fact 10)
        """
        ),
        "3628800",
        id="recursion-through-global",
    ),
    pytest.param(
        dedent(
            """\
            (def {apply-twice} (\\ {f x} {f (f x)}))
            (apply-twice (\\ {y} {* y 2}) 3)
        """
        ),
        "12",
        id="higher-order",
    ),
    pytest.param("(\\ {x} {+ x 1})", "(\\ {x} {+ x 1})", id="lambda-renders"),
    pytest.param("head", "<builtin>", id="builtin-renders"),
    pytest.param(
        "(\\ {1} {x})",
        "Error: Cannot define non-symbol. Got Number, Expected Symbol.",
        id="lambda-non-symbol-formal",
    ),
    pytest.param(
        "(\\ {x})",
        "Error: Function '\\' passed incorrect number of arguments. Got 1, Expected 2.",
        id="lambda-arity",
    ),
    pytest.param(
        "(\\ x {x})",
        "Error: Unbound symbol: 'x'",
        id="lambda-formals-evaluated-first",
    ),
    pytest.param(
        "(1 2 3)",
        "Error: S-expression starts with incorrect type! Got Number, Expected Function.",
        id="non-function-head",
    ),
]


@pytest.mark.parametrize("source, expected", SCENARIOS)
def test_functions(source: str, expected: str) -> None:
    run_case(source, expected)
