"""Literal parsing utilities for water.

Numeric sign folding, base prefixes and string unescaping happen here, so
literal nodes carry resolved values instead of raw lexer text.


File: literals.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

import re
from typing import TYPE_CHECKING

from waterlang import nodes
from waterlang.lexer import BOOL, NUMBER, STRING

if TYPE_CHECKING:
    from waterlang.parser import Parser


def parse_number(parser: 'Parser') -> nodes.Number:
    """
    Parse a numeric literal.

    Syntax:
        [+-]<digits> | [+-]0x<hex digits>

    The magnitude must fit a signed 64-bit integer, which also makes it a
    valid unsigned 64-bit integer. Zero is valid under both readings with
    either sign.

    Args:
        parser: The parser instance.

    Returns:
        nodes.Number
    """
    tok = parser.expect(NUMBER, 'number')
    text = tok.value

    sign = 1
    digits = text
    if digits[0] in '+-':
        if digits[0] == '-':
            sign = -1
        digits = digits[1:]

    try:
        if digits[:2] in ('0x', '0X'):
            magnitude = int(digits[2:], 16)
        else:
            magnitude = int(digits, 10)
    except ValueError:
        parser.errorf(f"illegal number syntax: {text}", tok.line)

    if magnitude > nodes.INT64_MAX:
        parser.errorf(f"illegal number syntax: {text}", tok.line)

    return nodes.Number(text, sign * magnitude, tok.line)


_ESCAPE = re.compile(
    r'\\(x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|[0-7]{3}|.?)', re.S
)

_SIMPLE_ESCAPES = {
    'a': '\a',
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
    'v': '\v',
    '\\': '\\',
    "'": "'",
    '"': '"',
}


def _resolve_escape(match) -> str:
    seq = match.group(1)
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if len(seq) > 1 and seq[0] in 'xuU':
        code = int(seq[1:], 16)
        if 0xD800 <= code <= 0xDFFF or code > 0x10FFFF:
            raise ValueError(f"invalid code point in escape \\{seq}")
        return chr(code)
    if len(seq) == 3:
        code = int(seq, 8)
        if code > 0xFF:
            raise ValueError(f"octal escape out of range: \\{seq}")
        return chr(code)
    if not seq:
        raise ValueError("unterminated escape sequence")
    raise ValueError(f"invalid escape sequence \\{seq}")


def unquote(literal: str) -> str:
    """
    Strip the delimiters of a string literal and resolve its escapes.

    Recognised escapes are ``\\a \\b \\f \\n \\r \\t \\v \\\\ \\' \\"``,
    three octal digits, ``\\xHH``, ``\\uHHHH`` and ``\\UHHHHHHHH``.

    Raises:
        ValueError: If an escape sequence is malformed or unknown.
    """
    body = literal[1:-1]
    if '\\' not in body:
        return body
    return _ESCAPE.sub(_resolve_escape, body)


def parse_string(parser: 'Parser') -> nodes.String:
    """
    Parse a string literal delimited by single or double quotes.
    """
    tok = parser.expect(STRING, 'string')
    try:
        text = unquote(tok.value)
    except ValueError as e:
        parser.errorf(f"cannot unquote the string literal: {e}", tok.line)
    return nodes.String(text, tok.line)


def parse_bool(parser: 'Parser') -> nodes.Bool:
    """
    Parse a boolean literal, ``#t`` or ``#f``.
    """
    tok = parser.expect(BOOL, 'bool')
    if tok.value not in ('#t', '#f'):
        parser.errorf(f"incorrect boolean value, should be #t or #f: {tok.value}", tok.line)
    return nodes.Bool(tok.value == '#t', tok.line)
