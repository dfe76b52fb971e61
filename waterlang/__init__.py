"""
water - a small S-expression language with a lexer, a recursive descent
parser and a tree-walk interpreter bound to Python host functions.

Source text flows through three stages::

    source -> tokenize/TokenStream -> parse -> Program -> Interpreter.execute

`run()` wires them together with the default primitives.
"""

import logging

from .environment import Environment
from .exceptions import (
    BindError,
    HostError,
    LexError,
    ParseError,
    UndefinedFunctionError,
    UndefinedVariableError,
    WaterError,
)
from .host import HostFunction, UInt, build_registry
from .interpreter import Interpreter, evaluate
from .lexer import Lexer, Token, TokenStream, tokenize
from .parser import Parser, parse
from .primitives import default_functions, default_registry
from .values import Closure, Kind

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def run(source: str, functions: dict | None = None, output=None, file: str = '<stdin>') -> Interpreter:
    """
    Parse and execute ``source``. The default primitives are used when no
    host functions are given.
    """
    program = parse(source, file)
    if functions is None:
        functions = default_functions()
    return evaluate(program, functions, output, file)


__all__ = [
    # Pipeline
    "tokenize",
    "parse",
    "evaluate",
    "run",
    "Lexer",
    "Token",
    "TokenStream",
    "Parser",
    "Interpreter",
    "Environment",

    # Values and host binding
    "Closure",
    "Kind",
    "HostFunction",
    "UInt",
    "build_registry",
    "default_functions",
    "default_registry",

    # Errors
    "WaterError",
    "LexError",
    "ParseError",
    "BindError",
    "HostError",
    "UndefinedVariableError",
    "UndefinedFunctionError",

    "__version__",
]
