import pytest

from gosp.errors import GospNameError, GospTypeError
from gosp.interpreter import (
    EvalResult,
    Interpreter,
    check_source,
    evaluate_files,
    evaluate_source,
)


def ok(code, result):
    return f"`{code}` ->\nResult: {result}\n"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(+ 1 2 3)", ok("(+ 1 2 3)", "6.000000")),
        ("(let x 5 (+ x x))", ok("(let x 5 (+ x x))", "10.000000")),
        ("[1 2 3]", ok("[1 2 3]", "[1 2 3]")),
        ('"hi"', ok('"hi"', "hi")),
        ("(+ 1 2) (* 2 3)", ok("(+ 1 2)", "3.000000") + ok("(* 2 3)", "6.000000")),
        ("  (+ 1 2)\n\n  7  ", ok("(+ 1 2)", "3.000000") + ok("7", "7")),
        ("", ""),
        ("   \n ", ""),
    ],
)
def test_successful_transcripts(state, source, expected):
    result = evaluate_source(state, "t", source)
    assert result == EvalResult(expected, None)
    assert result.ok


def test_definitions_persist_across_requests(state):
    evaluate_source(state, "t", "(defun sq (x double) (* x x))")
    result = evaluate_source(state, "t", "(sq 4) (map sq [1 2 3])")
    assert result.transcript == (
        ok("(sq 4)", "16.000000")
        + ok("(map sq [1 2 3])", "[1.000000 4.000000 9.000000]")
    )


def test_type_error_transcript(state):
    result = evaluate_source(state, "req", '(+ 1 "a")')
    assert result.transcript == (
        '(+ 1 "a")\n'
        + " " * 5 + "^" + "~" * 3 + "\n"
        + "req:1:6: +: Expected double, got str\n"
    )
    assert str(result.error_location) == "req:1:6"
    assert not result.ok


def test_unclosed_form_transcript(state):
    result = evaluate_source(state, "t", "(+ 1 2")
    assert result.transcript == (
        "(+ 1 2\n"
        + "^" + "~" * 5 + "\n"
        + "t:1:1: unclosed parens\n"
    )


def test_evaluation_resumes_after_an_error(state):
    result = evaluate_source(state, "t", "(foo) (+ 1 2)")
    assert result.transcript == (
        "(foo) (+ 1 2)\n"
        + " ^~~~\n"
        + "t:1:2: Unknown function 'foo'\n"
        + ok("(+ 1 2)", "3.000000")
    )
    assert str(result.error_location) == "t:1:2"


def test_only_the_first_error_location_is_returned(state):
    result = evaluate_source(state, "t", '(+ 1 2)\n(+ 1 "x")\n(bar)')
    lines = result.transcript.splitlines()
    assert lines[0] == "`(+ 1 2)` ->"
    assert lines[2] == '(+ 1 "x")'
    assert lines[4] == 't:2:6: +: Expected double, got str'
    assert lines[5] == "(bar)"
    assert lines[7] == "t:3:2: Unknown function 'bar'"
    assert str(result.error_location) == "t:2:6"


def test_error_recovery_stops_at_end_of_line(state):
    result = evaluate_source(state, "t", '(+ 1 "x"\n(+ 2 3)')
    assert result.transcript == (
        '(+ 1 "x"\n'
        + " " * 5 + "^~~\n"
        + "t:1:6: +: Expected double, got str\n"
        + ok("(+ 2 3)", "5.000000")
    )


def test_lex_error_transcript(state):
    result = evaluate_source(state, "t", '"abc')
    assert result.transcript.endswith("t:1:1: unclosed string literal\n")
    assert result.transcript.startswith('"abc\n^~~~\n')


def test_runtime_error_is_reported_at_the_form(state):
    evaluate_source(state, "t", "(let y 2 (defun addy (a double) (+ a y)))")
    result = evaluate_source(state, "t", "(+ 1 1) (addy 1)")
    assert result.transcript == (
        ok("(+ 1 1)", "2.000000")
        + "(+ 1 1) (addy 1)\n"
        + " " * 8 + "^" + "~" * 7 + "\n"
        + "t:1:9: +: Expected double, got y\n"
    )
    assert str(result.error_location) == "t:1:9"
    assert state.bindings == []


def test_failed_form_leaves_no_bindings(state):
    evaluate_source(state, "t", "(let x 1 (nope x))")
    assert state.bindings == []
    assert evaluate_source(state, "t", "(let x 2 x)").transcript == ok("(let x 2 x)", "2")


def test_failed_form_defines_no_functions(state):
    result = evaluate_source(state, "t", "(let x 1 (defun h (y int) y) z)")
    assert str(result.error_location) == "t:1:30"
    assert state.find_function("h") is None
    retry = evaluate_source(state, "t", "(let x 1 (defun h (y int) y))")
    assert retry.transcript == ok("(let x 1 (defun h (y int) y))", "undefined")
    assert evaluate_source(state, "t", "(h 3)").transcript == ok("(h 3)", "3")


def test_cyclic_identifiers_evaluate_to_a_symbol(state):
    result = evaluate_source(state, "t", "(defun g (a id b id) a) (g b a)")
    assert result.ok
    assert result.transcript == ok("(defun g (a id b id) a)", "undefined") + ok("(g b a)", "a")


def test_evaluate_files(state, tmp_path):
    lib = tmp_path / "lib.gosp"
    main = tmp_path / "main.gosp"
    lib.write_text("(defun sq (x double) (* x x))\n", encoding="utf-8")
    main.write_text('(sq 3)\n(sq "x")\n', encoding="utf-8")
    result = evaluate_files(state, [lib, main])
    assert ok("(sq 3)", "9.000000") in result.transcript
    assert result.error_location.source == str(main)
    assert (result.error_location.line, result.error_location.column) == (2, 5)


def test_check_source_does_not_evaluate(state):
    errors = check_source(state, "t", '(defun sq (x double) (* x x)) (sq "a") (nope)')
    assert [type(e) for e in errors] == [GospTypeError, GospNameError]
    assert [str(e) for e in errors] == [
        "t:1:35: sq: Expected double, got str",
        "t:1:41: Unknown function 'nope'",
    ]
    assert state.find_function("sq") is not None


def test_interpreter_keeps_state():
    interp = Interpreter(prelude="(defun sq (x double) (* x x))")
    assert interp.eval("(sq 5)").transcript == ok("(sq 5)", "25.000000")
    assert interp.eval("(defun cube (x double) (* x x x))").ok
    assert interp.eval("(cube 2)").transcript == ok("(cube 2)", "8.000000")


def test_interpreter_prelude_files(tmp_path):
    prelude = tmp_path / "prelude.gosp"
    prelude.write_text("(defun half (x double) (/ x 2))", encoding="utf-8")
    interp = Interpreter(prelude_files=[prelude])
    assert interp.eval("(half 3)").transcript == ok("(half 3)", "1.500000")
    script = tmp_path / "script.gosp"
    script.write_text("(half 1)", encoding="utf-8")
    assert interp.eval_files([script]).transcript == ok("(half 1)", "0.500000")
