"""
Utility functions shared across water tests.
"""
import io
from pathlib import Path

from waterlang import default_functions, parse, run

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def parse_source(source: str):
    """
    Parse source code and return the AST.
    """
    return parse(source, "<test>")


def run_source(source: str, functions: dict | None = None) -> str:
    """
    Run source code and return everything it printed.
    """
    output = io.StringIO()
    run(source, functions, output, "<test>")
    return output.getvalue()


def run_until_error(source: str, error_type, functions: dict | None = None):
    """
    Run source code that must fail. Returns the error and the output
    produced before it.
    """
    output = io.StringIO()
    try:
        run(source, functions, output, "<test>")
    except error_type as e:
        return e, output.getvalue()
    raise AssertionError(f"expected {error_type.__name__}")


def identity(value: object) -> object:
    return value


def with_helpers(**extra) -> dict:
    """
    The default primitives plus ``identity``, which lets a lambda body wrap
    a special form in a call.
    """
    functions = default_functions()
    functions['identity'] = identity
    functions.update(extra)
    return functions
