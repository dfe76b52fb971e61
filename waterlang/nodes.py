"""AST nodes for water.

Each node is an immutable dataclass. Child sequences are tuples, so a tree
cannot be modified once the parser has built it. The optional ``line`` is
kept for error messages only and does not take part in comparisons.


File: nodes.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from dataclasses import dataclass, field
from typing import Optional

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MASK = (1 << 64) - 1

# Call names the grammar handles itself
RESERVED_WORDS = frozenset({'define', 'set', 'if', 'begin', 'lambda'})


class Node:
    """Base class of all AST nodes."""


@dataclass(frozen=True)
class Program(Node):
    """The root: every top-level expression in source order."""
    children: tuple = ()

    def __str__(self):
        return f"list node containing {len(self.children)} nodes"


@dataclass(frozen=True)
class Call(Node):
    name: str
    args: tuple = ()
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"call node to function {self.name} with {len(self.args)} args"


@dataclass(frozen=True)
class Define(Node):
    name: str
    value: Node
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"define a variable node with name {self.name}"


@dataclass(frozen=True)
class Set(Node):
    name: str
    value: Node
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"set a variable node with name {self.name}"


@dataclass(frozen=True)
class If(Node):
    test: Node
    conseq: Node
    alt: Node
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return "if node"


@dataclass(frozen=True)
class Begin(Node):
    body: tuple
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"begin node with {len(self.body)} things to execute"


@dataclass(frozen=True)
class Var(Node):
    name: str
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"variable node with name {self.name}"


@dataclass(frozen=True)
class Number(Node):
    """
    A numeric literal.

    ``text`` is the literal as written, ``value`` the signed reading. Values
    always fit a signed 64-bit integer; the unsigned reading is derived when
    the literal is bound to an unsigned host parameter.
    """
    text: str
    value: int
    line: Optional[int] = field(default=None, compare=False)

    @property
    def unsigned(self) -> int:
        return self.value & UINT64_MASK

    def __str__(self):
        return f"number node with the value of {self.text}"


@dataclass(frozen=True)
class String(Node):
    text: str
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"string node containing ```{self.text}```"


@dataclass(frozen=True)
class Bool(Node):
    value: bool
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"bool node with the value of {'#t' if self.value else '#f'}"


@dataclass(frozen=True)
class Lambda(Node):
    params: tuple
    body: Call
    line: Optional[int] = field(default=None, compare=False)

    def __str__(self):
        return f"lambda node with arity {len(self.params)}"
