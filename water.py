"""
water Language Interpreter

This is the main entry point for the water language interpreter.

Workflow:
1. The source is read in full from the file named on the command line, or
   from standard input when no file is given.
2. The Lexer tokenizes the source concurrently while the Parser builds the AST.
3. The Interpreter walks the AST against the default primitive functions,
   printing the value of every top-level expression.

Set WATERDEBUG (or pass --debug) to dump the tokens and the AST before
execution and to enable debug logging.
"""
import argparse
import logging
import os
import sys

from waterlang import WaterError, default_functions, parse, tokenize
from waterlang.interpreter import Interpreter


def debug_print_tokens_ast(tokens, ast):
    """
    Print tokenized source and AST
    """
    print("\nTokens:\n")
    for token in tokens:
        print(repr(token))
    print("\nAST:\n")
    for node in ast.children:
        print(node)
    print(" ")


def read_source(script_name: str | None) -> str:
    """
    Read the whole script, or standard input when no script is given.
    """
    if script_name is None:
        return sys.stdin.read()
    with open(script_name, "r", encoding="utf-8") as f:
        return f.read()


def run_script(script_name: str | None, debug: bool = False) -> int:
    """
    Run a water script, returning the process exit code.
    """
    file = script_name or "<stdin>"
    try:
        code = read_source(script_name)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        ast = parse(code, file)
        if debug:
            debug_print_tokens_ast(tokenize(code), ast)
        interpreter = Interpreter(default_functions(), sys.stdout, file)
        interpreter.execute(ast)
    except WaterError as e:
        sys.stdout.flush()
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str]) -> int:
    """
    Entry point for the CLI.
    """
    parser = argparse.ArgumentParser(
        prog="water",
        description="Run a water program.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "script",
        nargs="?",
        default=None,
        help="Path to a water source file (default: read standard input)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=bool(os.environ.get("WATERDEBUG")),
        help="Dump tokens and AST and enable debug logging (also set by WATERDEBUG)"
    )
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    return run_script(args.script, args.debug)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
