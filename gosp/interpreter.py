"""Entry points of the Gosp language core.

`new_state()` and `evaluate_source()` are what a host needs: the first gives a
builtins-only interpreter state, the second parses and evaluates every
top-level form of a snippet and returns a transcript. Errors never escape;
the transcript reports them and the location of the first one is returned
separately so the host can flag the request as failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple, Optional

from gosp import Expression
from gosp.builtin.env_builtin import register
from gosp.errors import GospError
from gosp.evaluation.evaluator import to_display_string
from gosp.reader.parser import Parser
from gosp.reader.source import Location, SourceReader
from gosp.types.environment import InterpreterState


class EvalResult(NamedTuple):
    transcript: str
    error_location: Optional[Location]

    @property
    def ok(self) -> bool:
        return self.error_location is None


@dataclass
class TopLevelForm:
    start: Location
    end: Location
    expr: Expression = None
    error: Optional[GospError] = None


def new_state() -> InterpreterState:
    """Fresh state: builtins only, no bindings."""
    state = InterpreterState()
    register(state)
    return state


def iter_forms(parser: Parser, state: InterpreterState) -> Iterator[TopLevelForm]:
    """Parse top-level forms one by one across all buffers.

    After a failure the parser has rolled back to the start of the form; one
    balanced expression is skipped from there and parsing resumes.
    """
    lexer = parser.lexer
    while lexer.skip_spaces():
        start = lexer.save()
        try:
            expr = parser.parse_expression(state)
        except GospError as err:
            lexer.skip_expression()
            yield TopLevelForm(start, lexer.save(), error=err)
            continue
        yield TopLevelForm(start, lexer.save(), expr=expr)


def _write_error(buffer: StringIO, reader: SourceReader, err: GospError, end: Location) -> None:
    loc = err.location
    if loc is None:
        buffer.write(f"error: {err.message}\n")
        return
    line = reader.line_text(loc)
    if line is not None:
        buffer.write(line)
        buffer.write("\n")
        buffer.write(" " * (max(loc.column, 1) - 1))
        buffer.write("^")
        fragment = reader.fragment(loc, end)
        if len(fragment) > 1:
            buffer.write("~" * (len(fragment) - 1))
        buffer.write("\n")
    buffer.write(f"{loc}: {err.message}\n")


def run_transcript(parser: Parser, state: InterpreterState) -> EvalResult:
    """Parse and evaluate everything left in the parser's buffers."""
    first_error: Optional[Location] = None
    with StringIO() as buffer:
        for form in iter_forms(parser, state):
            error = form.error
            if error is None:
                try:
                    rendered = to_display_string(state, form.expr)
                except GospError as err:
                    if err.location is None:
                        err.location = form.start
                    error = err
                else:
                    buffer.write("`")
                    buffer.write(parser.lexer.fragment(form.start, form.end))
                    buffer.write("` ->\n")
                    buffer.write(f"Result: {rendered}\n")
                    continue
            if first_error is None:
                first_error = error.location or form.start
            _write_error(buffer, parser.lexer, error, form.end)
        return EvalResult(buffer.getvalue(), first_error)


def evaluate_source(state: InterpreterState, source_name: str, source_text: str) -> EvalResult:
    """Evaluate a snippet as one named buffer; returns (transcript, first error location)."""
    parser = Parser()
    parser.add_named_source(source_name, source_text)
    return run_transcript(parser, state)


def evaluate_files(state: InterpreterState, paths: Iterable[str | Path]) -> EvalResult:
    """Evaluate several files as consecutive buffers of one parser."""
    parser = Parser()
    for path in paths:
        parser.add_source_file(path)
    return run_transcript(parser, state)


def check_source(state: InterpreterState, source_name: str, source_text: str) -> list[GospError]:
    """Parse without evaluating; every form's error, in source order."""
    parser = Parser()
    parser.add_named_source(source_name, source_text)
    return [form.error for form in iter_forms(parser, state) if form.error is not None]


class Interpreter:
    """
    A persistent Gosp interpreter.
    Keeps one state so definitions survive across `eval` calls.
    """

    def __init__(self, prelude: str | None = None, prelude_files: Iterable[str | Path] = ()):
        self.state = new_state()
        if prelude:
            self.eval(prelude, source_name="prelude")
        prelude_files = list(prelude_files)
        if prelude_files:
            evaluate_files(self.state, prelude_files)

    def eval(self, code: str, source_name: str = "<input>") -> EvalResult:
        """Evaluate code against the interpreter's state."""
        return evaluate_source(self.state, source_name, code)

    def eval_files(self, paths: Iterable[str | Path]) -> EvalResult:
        return evaluate_files(self.state, paths)


#  Example use-age:
if __name__ == "__main__":
    interp = Interpreter(prelude="(defun sq (x double) (* x x))")

    tests = [
        "(+ 1 2 3)",
        "(let x 5 (+ x x))",
        "(sq 4)",
        "(map sq [1 2 3])",
        '(+ 1 "two")',
    ]

    for code in tests:
        result = interp.eval(code)
        print(result.transcript, end="")
