from __future__ import annotations

from textwrap import dedent

import pytest

from lispy import runner
from tests.support.harness import LNumber, ParseError, make_global_env, run_program


def test_run_uses_fresh_environment_by_default() -> None:
    assert run_program("(def {x} 5)") is not None
    assert repr(run_program("x")) == "Error: Unbound symbol: 'x'"


def test_run_raises_parse_error() -> None:
    with pytest.raises(ParseError):
        run_program("(+ 1 2")


def test_run_returns_values() -> None:
    assert run_program("(+ 2 2)") == LNumber(4)


def test_run_lines_shares_scope_and_skips_blanks() -> None:
    outputs = list(runner.run_lines(["(def {a} 3)", "", "   ", "(* a a)"]))
    assert outputs == ["()", "9"]


def test_main_command(capsys: pytest.CaptureFixture[str]) -> None:
    runner.main(["-c", "(def {x} 4)\n(+ x 1)"])
    assert capsys.readouterr().out == "()\n5\n"


def test_main_file(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "prog.lspy"
    src.write_text("; squares\n(def {sq} (\\ {n} {* n n}))\n(sq 12)\n", encoding="utf-8")

    runner.main([str(src)])
    assert capsys.readouterr().out == "()\n144\n"


def test_main_tree(capsys: pytest.CaptureFixture[str]) -> None:
    runner.main(["--tree", "-c", "{1}"])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "lispy"
    assert out[1] == "  qexpr"


def test_main_missing_file() -> None:
    with pytest.raises(SystemExit):
        runner.main(["/nonexistent/prog.lspy"])


def test_main_print_builtin(capsys: pytest.CaptureFixture[str]) -> None:
    runner.main(["-c", "(print 1 {2 3} head)"])
    assert capsys.readouterr().out == "1 {2 3} <builtin>\n()\n"


SUM_TO = "(def {sum} (\\ {n} {if (== n 0) {0} {+ n (sum (- n 1))}}))"
LOOP = "(def {loop} (\\ {n} {loop n}))"


@pytest.mark.parametrize(
    "lines, inputs",
    [
        pytest.param(["(+ 1 2)", "(+ 3 4)"], ["(+ 1 2)", "(+ 3 4)"], id="one-per-line"),
        pytest.param(
            ["(def {f}", "  (\\ {x}", "    {* x 2}))", "(f 4)"],
            ["(def {f}\n  (\\ {x}\n    {* x 2}))", "(f 4)"],
            id="multi-line-form",
        ),
        pytest.param(
            ["; header", "", "(list 1", "  ; inside", "  2)"],
            ["(list 1\n  ; inside\n  2)"],
            id="comments-between-forms",
        ),
        pytest.param(["(+ 1 2) ; sum"], ["(+ 1 2) ; sum"], id="trailing-comment"),
        pytest.param(["(+ 1", "2"], ["(+ 1\n2"], id="unclosed-at-end"),
        pytest.param(["(+ 1))", "5"], ["(+ 1))", "5"], id="over-closed"),
    ],
)
def test_split_inputs(lines: list[str], inputs: list[str]) -> None:
    assert list(runner.split_inputs(lines)) == inputs


def test_run_lines_multi_line_definition() -> None:
    outputs = list(runner.run_lines(["(def {sq}", "  (\\ {n} {* n n}))", "(sq 7)"]))
    assert outputs == ["()", "49"]


def test_main_file_with_multi_line_forms(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "fib.lspy"
    src.write_text(
        dedent(
            """\
            ; fibonacci
            (def {fib} (\\ {n}
              {if (< n 2)
                {n}
                {+ (fib (- n 1)) (fib (- n 2))}}))

            (fib 10)
            """
        ),
        encoding="utf-8",
    )

    runner.main([str(src)])
    assert capsys.readouterr().out == "()\n55\n"


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param(f"{SUM_TO}\n(sum 500)", "()\n125250\n", id="deep-recursion"),
        pytest.param(
            f"{LOOP}\n(loop 1)\n(+ 1 2)",
            "()\nError: Maximum recursion depth exceeded!\n3\n",
            id="runaway-recursion-then-continue",
        ),
    ],
)
def test_main_recursion(source: str, expected: str, capsys: pytest.CaptureFixture[str]) -> None:
    runner.main(["-c", source])
    assert capsys.readouterr().out == expected


def test_rep_reports_runaway_recursion() -> None:
    env = make_global_env()
    assert runner.rep(LOOP, env) == "()"
    assert runner.rep("(loop 1)", env) == "Error: Maximum recursion depth exceeded!"
    assert runner.rep("(+ 1 2)", env) == "3"
