"""Errors.

Every failure the language itself can produce derives from
:class:`WaterError`. Lexing and parsing failures are syntax errors, binding
failures cover scope, arity and type problems at evaluation time, and host
errors wrap the error returned by a host function. Anything that is not a
``WaterError`` is an interpreter bug and is never caught by the evaluator.


File: exceptions.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""


class WaterError(Exception):
    """
    Base class for language-level errors.
    """
    def __init__(self, message, line=None, file=None):
        self.line = line
        self.file = file
        self.reason = message
        if line is not None:
            message += f" on line {line}"
        if file is not None:
            message += f" in {file}"
        super().__init__(message)


class LexError(WaterError):
    """
    Error for malformed tokens.
    """


class ParseError(WaterError):
    """
    Error for token sequences that do not match the grammar.
    """


class BindError(WaterError):
    """
    Error raised while evaluating: scope, arity and argument type problems.
    """


class UndefinedVariableError(BindError):
    """
    Error for undefined variables.
    """
    def __init__(self, varname, line=None, file=None):
        self.varname = varname
        super().__init__(f"variable not defined: {varname}", line, file)


class UndefinedFunctionError(BindError):
    """
    Error for calls to names that are neither host functions nor closures.
    """
    def __init__(self, name, line=None, file=None):
        self.name = name
        super().__init__(f"function not defined: {name}", line, file)


class HostError(WaterError):
    """
    Error returned by a host function, annotated with the function name.
    """
    def __init__(self, name, error, line=None, file=None):
        self.name = name
        self.error = error
        super().__init__(f"error calling {name}: {error}", line, file)
