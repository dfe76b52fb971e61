"""Runtime values.

A value is the unit value ``None``, a ``bool``, an ``int``, a ``str`` or a
:class:`Closure`. Closures are the only values built at run time; they are
shared by reference between every binding that holds them.


File: values.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass
from enum import Enum

from waterlang import nodes
from waterlang.environment import Environment


class Kind(Enum):
    """Primitive kinds a host function may declare for its parameters."""
    ANY = 'any'
    UNIT = 'unit'
    BOOL = 'bool'
    INT = 'int'
    UINT = 'uint'
    STRING = 'string'
    CLOSURE = 'closure'
    ERROR = 'error'

    def __str__(self):
        return self.value


@dataclass(eq=False)
class Closure:
    """Runtime representation of a lambda value."""
    params: tuple
    body: nodes.Call
    env: Environment

    @property
    def arity(self) -> int:
        return len(self.params)

    def __str__(self):
        return f"<lambda value with arity {self.arity}>"


def kind_of(value) -> Kind:
    """
    Return the kind of a runtime value.

    Raises:
        TypeError: For Python objects outside the value model.
    """
    if value is None:
        return Kind.UNIT
    # bool before int, bool is an int subclass
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, Closure):
        return Kind.CLOSURE
    raise TypeError(f"{type(value).__name__} is not a water value")


def format_value(value) -> str:
    """
    Render a value for the output sink. Strings are returned unchanged.
    """
    if isinstance(value, bool):
        return '#t' if value else '#f'
    return str(value)
