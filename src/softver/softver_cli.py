"""
softver CLI Entrypoint.

Command-line front end for the expression reduction engine.

Features:
    - Read source from `.while` files or inline strings.
    - Tokenize and reduce the source to a single arithmetic or boolean expression.
    - Print the resulting tree as a Python repr or as JSON.
    - Optionally evaluate the expression against a state given on the command line.
    - Optionally trace the node sequence after every reduction pass.

Example usage:
    softver -s "(x + 1) * 2"
    softver -s "x < 3 && y >= 1" --state x=1 --state y=2 -e
    softver expr.while -m arith -j
    softver -s "2 + 3 * 4" --trace

Functions:
    parse_state(assignments) -> dict[str, int]:
        Turn `NAME=VALUE` strings into a program state.

    run_softver(source, ...) -> None:
        Executes the full pipeline (lex -> reduce -> print/evaluate).

    main(argv=None) -> None:
        Parses CLI arguments and invokes `run_softver`.
"""

import argparse
import json
import logging
import sys

from softver.softver_errors import UnboundVariable
from softver.softver_parser import ARITHMETIC, BOOLEAN, parse_expression
from softver.softver_sequence import NodeSequence

logger = logging.getLogger(__name__)

MODES = {"auto": None, "arith": ARITHMETIC, "bool": BOOLEAN}


def parse_state(assignments: list[str]) -> dict[str, int]:
    """
    Build a program state from `NAME=VALUE` strings.

    Raises:
        ValueError: If an entry has no `=` or its value is not an integer.
    """
    state: dict[str, int] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid state entry {item!r}; expected NAME=VALUE")
        try:
            state[name.strip()] = int(value.strip())
        except ValueError:
            raise ValueError(f"State value for {name.strip()!r} is not an integer") from None
    return state


def print_trace(pass_name: str, sequence: NodeSequence) -> None:
    print(f"[{pass_name:>10}] {list(sequence)!r}")


def run_softver(
    source: str,
    is_string: bool = False,
    mode: str = "auto",
    as_json: bool = False,
    state: dict[str, int] | None = None,
    evaluate: bool = False,
    trace: bool = False,
) -> None:
    """
    Run the softver pipeline: lex, reduce, and print or evaluate the result.

    Args:
        source (str): Expression text or path to a `.while` file.
        is_string (bool): If True, treats `source` as raw text instead of a file path.
        mode (str): 'auto', 'arith' or 'bool'; selects the expected category.
        as_json (bool): Print the tree as JSON instead of its repr.
        state (dict[str, int] | None): Variable bindings used by `evaluate`.
        evaluate (bool): Also print the value of the expression.
        trace (bool): Print the node sequence after every reduction pass.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.while'.
        ParseError / LexError: If the source is not a well-formed expression.
        UnboundVariable: If evaluation reads a variable missing from `state`.
    """
    if not is_string and not source.endswith(".while"):
        raise ValueError("Only .while files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    tree = parse_expression(
        source, category=MODES[mode], trace=print_trace if trace else None
    )
    logger.debug("reduced %r to %r", source, tree)

    if as_json:
        print(json.dumps(tree.to_dict(), indent=2))
    else:
        print(repr(tree))

    if evaluate:
        print(tree.evaluate(state or {}))


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the softver CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-m`, `--mode`: Expected category ('auto', 'arith' or 'bool'), default 'auto'.
        - `-j`, `--json`: Print the tree as JSON.
        - `-e`, `--eval`: Evaluate the expression.
        - `--state NAME=VALUE`: Bind a variable for evaluation (repeatable).
        - `--trace`: Print the node sequence after every pass.
        - `-v`, `--verbose`: Enable debug logging.

    Parse and evaluation errors are reported on stderr and exit with status 1.
    """
    parser = argparse.ArgumentParser(prog="softver")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=tuple(MODES),
        default="auto",
        help="Expected expression category (default: auto)",
    )
    parser.add_argument(
        "-j", "--json", dest="as_json", action="store_true", help="Print AST as JSON"
    )
    parser.add_argument(
        "-e",
        "--eval",
        dest="evaluate",
        action="store_true",
        help="Evaluate the expression against --state",
    )
    parser.add_argument(
        "--state",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Bind a variable for evaluation (repeatable)",
    )
    parser.add_argument(
        "--trace", action="store_true", help="Print the sequence after every pass"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        state = parse_state(args.state)
    except ValueError as e:
        parser.error(str(e))

    try:
        run_softver(
            source=args.source,
            is_string=args.string,
            mode=args.mode,
            as_json=args.as_json,
            state=state,
            evaluate=args.evaluate,
            trace=args.trace,
        )
    except (SyntaxError, UnboundVariable) as e:
        kind = type(e).__name__
        print(f"[error] {kind}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
