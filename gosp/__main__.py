"""Command line entry point: `python -m gosp`.

Evaluates files and -e snippets and prints their transcripts; with no input
it starts a line-by-line REPL on one persistent state.
"""

from __future__ import annotations

import argparse
import logging
import sys

from gosp.config import get_log_level, get_prelude_paths
from gosp.interpreter import Interpreter, check_source, evaluate_files

PROMPT = "gosp> "


def repl(interp: Interpreter) -> int:
    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line.strip():
            continue
        result = interp.eval(line, source_name="repl")
        print(result.transcript, end="")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="gosp", add_help=True)
    parser.add_argument("sources", nargs="*", help="Gosp source files, evaluated as one buffer list")
    parser.add_argument("-e", "--eval", dest="snippets", action="append", default=[],
                        help="Evaluate a snippet (repeatable).")
    parser.add_argument("--prelude", action="append", default=[],
                        help="Source file evaluated before everything else (repeatable).")
    parser.add_argument("--check", action="store_true",
                        help="Parse + type check only; do not evaluate.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")

    prelude = [*get_prelude_paths(), *args.prelude]
    interp = Interpreter(prelude_files=prelude)

    if not args.sources and not args.snippets:
        return repl(interp)

    failed = False
    if args.check:
        for path in args.sources:
            with open(path, "r", encoding="utf-8") as f:
                errors = check_source(interp.state, path, f.read())
            for err in errors:
                print(err)
            failed = failed or bool(errors)
        for i, snippet in enumerate(args.snippets):
            errors = check_source(interp.state, f"<eval-{i}>", snippet)
            for err in errors:
                print(err)
            failed = failed or bool(errors)
        return 1 if failed else 0

    if args.sources:
        result = evaluate_files(interp.state, args.sources)
        print(result.transcript, end="")
        failed = not result.ok
    for i, snippet in enumerate(args.snippets):
        result = interp.eval(snippet, source_name=f"<eval-{i}>")
        print(result.transcript, end="")
        failed = failed or not result.ok
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
