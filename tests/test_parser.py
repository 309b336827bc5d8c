import pytest

from gosp.errors import (
    GospArityError,
    GospError,
    GospLexError,
    GospNameError,
    GospSyntaxError,
    GospTypeError,
)
from gosp.evaluation.special_forms import KEYWORD_FORMS, PAREN_FORMS
from gosp.reader.parser import Parser
from gosp.types import expr_type as T
from gosp.types.expression import Call, Let
from gosp.types.symbol import Symbol
from gosp.types.undefined import Undefined

SQ = "(defun sq (x double) (* x x))"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", 42),
        ("-7", -7),
        ("4.5", 4.5),
        ('"hi"', "hi"),
        ("foo", Symbol("foo")),
        ("[1 2 3]", [1, 2, 3]),
        ("[]", []),
        ("[[1] [2 3] []]", [[1], [2, 3], []]),
        ('["a" "b"]', ["a", "b"]),
    ],
)
def test_parse_atoms_and_lists(parse, source, expected):
    assert parse(source) == expected


def test_parse_call(parse):
    expr = parse("(+ 1 (* 2 3))")
    assert isinstance(expr, Call)
    assert expr.function.id == "+"
    assert expr.args[0] == 1
    assert expr.args[1].function.id == "*"
    assert expr.args[1].args == [2, 3]
    assert repr(expr) == "(+ 1 (* 2 3))"


def test_parse_let(parse, state):
    expr = parse("(let x 5 (+ x x))")
    assert isinstance(expr, Let)
    assert (expr.name, expr.bound) == ("x", 5)
    assert expr.body.args == [Symbol("x"), Symbol("x")]
    assert expr.value_type == T.DOUBLE
    assert state.bindings == []


def test_let_body_sees_bound_type(parse):
    with pytest.raises(GospTypeError) as excinfo:
        parse('(let s "text" (+ s 1))')
    assert excinfo.value.message == "+: Expected double, got str"
    assert str(excinfo.value.location) == "test:1:18"


def test_parse_defun_registers_function(parse, state):
    assert parse(SQ) is Undefined
    sq = state.find_function("sq")
    assert sq.signature.fixed == (T.DOUBLE,)
    assert sq.signature.variadic is None
    assert sq.signature.returns == T.DOUBLE
    assert str(sq.location) == "test:1:8"
    assert sq.describe() == "(sq x:double) -> double"
    assert state.bindings == []


def test_defun_return_type_follows_body(parse, state):
    parse("(defun wrap (x int) [x x])")
    parse("(defun name (x str) x)")
    parse("(defun nothing () (defun inner () 1))")
    assert state.find_function("wrap").signature.returns == T.list_of(T.INT)
    assert state.find_function("name").signature.returns == T.STR
    assert state.find_function("nothing").signature.returns == T.NONE


def test_defined_functions_are_callable(parse):
    parse(SQ)
    expr = parse("(sq 4)")
    assert isinstance(expr, Call) and expr.function.id == "sq"
    assert parse("(map sq [1 2 3])").function.id == "map"


def test_let_value_flows_into_calls(parse):
    expr = parse("(+ (let x 2 x) 1)")
    assert isinstance(expr.args[0], Let)
    assert expr.args[0].value_type == T.INT


@pytest.mark.parametrize(
    "source,error,message,location",
    [
        ("", GospSyntaxError, "no token found", "test:1:1"),
        (")", GospSyntaxError, "Unknown token: )", "test:1:1"),
        ("{", GospSyntaxError, "Unknown token: {", "test:1:1"),
        ("(1 2)", GospSyntaxError, "Expected id, got int", "test:1:2"),
        ("(", GospSyntaxError, "Expected id, got nothing", "test:1:2"),
        ("(foo 1)", GospNameError, "Unknown function 'foo'", "test:1:2"),
        ("(+ 1 2", GospSyntaxError, "unclosed parens", "test:1:1"),
        ("[1 2", GospSyntaxError, "unclosed bracket", "test:1:1"),
        ("(+ 1 #)", GospLexError, "'#' does not start any known token", "test:1:6"),
        ('(+ 1 "a")', GospTypeError, "+: Expected double, got str", "test:1:6"),
        ("(- 1)", GospArityError, "-: too few arguments, expected 2, got 1", "test:1:5"),
        ("(/ 1 2 3)", GospArityError, "/: too many arguments, expected 2", "test:1:8"),
        ("(- 1 2", GospSyntaxError, "unclosed parens", "test:1:1"),
        ("(map 1 [1])", GospTypeError, "map: Expected id, got int", "test:1:6"),
        ("(map f 5)", GospTypeError, "map: Expected list, got int", "test:1:8"),
        ('[1 "a"]', GospTypeError, "list: Expected int, got str", "test:1:4"),
        ("[1 2.5]", GospTypeError, "list: Expected int, got double", "test:1:4"),
        ("[1 (+ 1 2)]", GospTypeError, "list: Expected int, got double", "test:1:4"),
        ("[[1] [2.5]]", GospTypeError, "list: Expected list[int], got list[double]", "test:1:6"),
        ("(let x 5 (let x 6 x))", GospNameError, "'x' is already bound", "test:1:15"),
        ("(let + 1 +)", GospNameError, "'+' is already defined as a function", "test:1:6"),
        ("(let let 1 2)", GospNameError, "'let' is a reserved word", "test:1:6"),
        ("(let x 1)", GospSyntaxError, "Unknown token: )", "test:1:9"),
        ("(let x 1 x", GospSyntaxError, "unclosed parens", "test:1:1"),
        ("(let x 1 x x)", GospSyntaxError, "Expected ), got id", "test:1:12"),
        ("(let 5 1 2)", GospSyntaxError, "Expected id, got int", "test:1:6"),
        ("(defun map (x int) x)", GospNameError, "'map' is already defined as a function", "test:1:8"),
        ("(defun f (x float) x)", GospSyntaxError, "Unknown type 'float'", "test:1:13"),
        ("(defun f (x int x int) x)", GospNameError, "duplicate parameter 'x'", "test:1:17"),
        ("(defun f (f int) f)", GospNameError, "duplicate parameter 'f'", "test:1:11"),
        ("(defun f (+ int) 1)", GospNameError, "'+' is already defined as a function", "test:1:11"),
        ("(defun f (x int) (+ x \"s\"))", GospTypeError, "+: Expected double, got str", "test:1:23"),
        ("(defun f (x int", GospSyntaxError, "unclosed parens", "test:1:10"),
        ("(defun f x x)", GospSyntaxError, "Expected (, got id", "test:1:10"),
    ],
)
def test_parse_errors(parse, source, error, message, location):
    with pytest.raises(error) as excinfo:
        parse(source)
    assert excinfo.value.message == message
    assert str(excinfo.value.location) == location


@pytest.mark.parametrize(
    "source,message",
    [
        ('(sq "a")', "sq: Expected double, got str"),
        ("(sq)", "sq: too few arguments, expected 1, got 0"),
        ("(sq 1 2)", "sq: too many arguments, expected 1"),
        ("(sq [1])", "sq: Expected double, got list[int]"),
        ("(defun sq (y int) y)", "'sq' is already defined as a function"),
    ],
)
def test_user_function_errors(parse, source, message):
    parse(SQ)
    with pytest.raises(GospError) as excinfo:
        parse(source)
    assert excinfo.value.message == message


def test_failed_defun_registers_nothing(parse, state):
    with pytest.raises(GospError):
        parse("(defun bad (x int) (nope x))")
    assert state.find_function("bad") is None
    assert state.bindings == []


@pytest.mark.parametrize(
    "source",
    [
        "(let y 1 (foo y))",
        "(let y 1 (let z [y] (+ z 1)))",
        "(defun g (a int b str) (+ a b))",
        '(+ 1 2 (* 3 "x"))',
        "[1 [2]]",
        "(let y 1 (defun k (a int) a) z)",
    ],
)
def test_failure_restores_parser_state(state, source):
    parser = Parser()
    parser.add_named_source("test", source)
    before = parser.snapshot(state)
    with pytest.raises(GospError):
        parser.parse_expression(state)
    assert parser.snapshot(state) == before
    assert state.bindings == []


def test_unmatched_alternative_consumes_nothing(state):
    parser = Parser()
    parser.add_named_source("test", "(+ 1 2)")
    opener = parser.get_token()
    before = parser.snapshot(state)
    for form in KEYWORD_FORMS.values():
        assert parser.attempt(form, state, opener) is None
        assert parser.snapshot(state) == before
    assert parser.attempt(PAREN_FORMS[-1], state, opener).function.id == "+"


def test_peek_token_does_not_move(state):
    parser = Parser()
    parser.add_named_source("test", "a b")
    first = parser.get_token()
    assert parser.peek_token().value == "b"
    assert parser.token is first
    assert parser.get_token().value == "b"


def test_forms_continue_across_buffers(state):
    parser = Parser()
    parser.add_named_source("one", "(+ 1")
    parser.add_named_source("two", "2)")
    expr = parser.parse_expression(state)
    assert expr.args == [1, 2]


def test_reserved_word_let_is_not_callable(parse):
    with pytest.raises(GospError):
        parse("(let)")
