from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .ast_nodes import Program
from .evaluator import Evaluator
from .lexer_rd import LexError
from .parse_lark import parse_source_lark
from .parser_rd import ParseError, parse_source
from .runtime import Environment, ErrorSignal, MonkeyRuntimeError, Outcome
from .utils import format_outcome, report_host_error

FRONT_ENDS: Dict[str, Callable[[str], Program]] = {
    "rd": parse_source,
    "lark": parse_source_lark,
}

# Failures that stop a run before or outside the language's own error values.
HOST_ERRORS = (LexError, ParseError, MonkeyRuntimeError, RecursionError)

USAGE = """\
usage: monkey [--lark] [FILE | SOURCE | -]

  FILE     path to a Monkey source file
  SOURCE   literal program text
  -        read the program from stdin (default when stdin is not a terminal)

With no argument on a terminal, starts the interactive REPL.
  --lark   parse with the lark LALR grammar instead of the hand-written parser
"""

def parse(src: str, front_end: str="rd") -> Program:
    try:
        parser = FRONT_ENDS[front_end]
    except KeyError:
        raise ValueError(f"Unknown front end {front_end!r}") from None

    return parser(src)

def run(src: str, env: Optional[Environment]=None, front_end: str="rd") -> Outcome:
    """Parse and evaluate `src`. Pass `env` to keep bindings between runs."""
    program = parse(src, front_end)

    return Evaluator(env).eval(program)

def repl_eval(src: str, env: Environment) -> Outcome:
    return run(src, env=env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]]=None) -> int:
    front_end = "rd"
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token in ("-h", "--help"):
            print(USAGE, end="")
            return 0

        if token == "--lark":
            front_end = "lark"
            continue

        if token.startswith("--"):
            raise SystemExit(f"Unknown flag: {token}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None and sys.stdin.isatty():
        from .repl import repl  # prompt_toolkit is only needed interactively

        repl()
        return 0

    source = _load_source(arg)

    try:
        outcome = run(source, front_end=front_end)
    except HOST_ERRORS as exc:
        report_host_error(exc)
        return 1

    if isinstance(outcome, ErrorSignal):
        print(format_outcome(outcome), file=sys.stderr)
        return 1

    if outcome is not None:
        print(format_outcome(outcome))

    return 0

if __name__ == "__main__":
    sys.exit(main())
