"""Primitive host functions.

The default registry handed to the interpreter by the command line: integer
arithmetic, comparisons, boolean negation and string formatting. Each
primitive is a plain Python function whose annotations declare the kinds
the interpreter binds against (see :mod:`waterlang.host`).

Integer results wrap to signed 64 bits. ``/`` and ``%`` truncate toward
zero and report a zero divisor through the ``(value, error)`` convention.


File: primitives.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import json
import re

from waterlang.host import Registry, build_registry
from waterlang.values import Kind, format_value, kind_of

_VERB = re.compile(r'%(.?)', re.S)


def _wrap(n: int) -> int:
    n &= (1 << 64) - 1
    return n - (1 << 64) if n >> 63 else n


def plus(a: int, b: int, *rest: int) -> int:
    return _wrap(a + b + sum(rest))


def minus(a: int, *rest: int) -> int:
    if not rest:
        return _wrap(-a)
    return _wrap(a - sum(rest))


def times(a: int, b: int, *rest: int) -> int:
    result = a * b
    for n in rest:
        result = _wrap(result * n)
    return _wrap(result)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def divide(a: int, b: int) -> tuple[int, Exception | None]:
    if b == 0:
        return 0, ZeroDivisionError("integer divide by zero")
    return _wrap(_trunc_div(a, b)), None


def modulo(a: int, b: int) -> tuple[int, Exception | None]:
    if b == 0:
        return 0, ZeroDivisionError("integer divide by zero")
    return _wrap(a - b * _trunc_div(a, b)), None


def greater_than(a: int, b: int) -> bool:
    return a > b


def greater_equal(a: int, b: int) -> bool:
    return a >= b


def less_than(a: int, b: int) -> bool:
    return a < b


def less_equal(a: int, b: int) -> bool:
    return a <= b


def equal(a: object, b: object) -> bool:
    return kind_of(a) is kind_of(b) and a == b


def not_(a: bool) -> bool:
    return not a


def _format_verb(verb: str, arg) -> str:
    kind = kind_of(arg)
    if verb == 'v':
        return format_value(arg)
    if verb == 's' and isinstance(arg, str):
        return arg
    if verb == 'q' and isinstance(arg, str):
        return json.dumps(arg, ensure_ascii=False)
    if verb == 'd' and kind is Kind.INT:
        return str(arg)
    if verb == 'x' and kind is Kind.INT:
        return format(arg, 'x')
    if verb == 'x' and isinstance(arg, str):
        return arg.encode('utf-8').hex()
    if verb == 't' and isinstance(arg, bool):
        return 'true' if arg else 'false'
    return f"%!{verb}({kind}={format_value(arg)})"


def go_format(fmt: str, args) -> str:
    """
    Substitute ``%v %s %q %d %x %t`` verbs the way Go's ``fmt`` does,
    including its markers for missing and extra arguments.
    """
    args = list(args)
    used = 0

    def substitute(match):
        nonlocal used
        verb = match.group(1)
        if verb == '%':
            return '%'
        if not verb:
            return '%!(NOVERB)'
        if used >= len(args):
            return f"%!{verb}(MISSING)"
        arg = args[used]
        used += 1
        return _format_verb(verb, arg)

    out = _VERB.sub(substitute, fmt)
    if used < len(args):
        extra = ', '.join(f"{kind_of(a)}={format_value(a)}" for a in args[used:])
        out += f"%!(EXTRA {extra})"
    return out


def print_(fmt: str, *args: object) -> str:
    return go_format(fmt, args) + '\n'


def println(*args: object) -> str:
    return ' '.join(format_value(a) for a in args) + '\n'


def default_functions() -> dict:
    """Host functions by the names water programs call them."""
    return {
        '+': plus,
        '-': minus,
        '*': times,
        '/': divide,
        '%': modulo,
        '>': greater_than,
        '>=': greater_equal,
        '<': less_than,
        '<=': less_equal,
        '=': equal,
        'not': not_,
        'print': print_,
        'println': println,
    }


def default_registry() -> Registry:
    return build_registry(default_functions())
