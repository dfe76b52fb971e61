"""Special form parsing utilities for water.

These functions operate on a `waterlang.parser.parser.Parser` instance whose
opening parenthesis has already been consumed. They handle the call-shaped
forms that are not ordinary function calls: ``define``, ``set``, ``if``,
``begin`` and ``lambda``.


File: forms.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from waterlang import nodes
from waterlang.lexer import CALL, DEFINE, DIGITS, EOF, LPAREN, QUOTES, RPAREN, VAR
from waterlang.nodes import RESERVED_WORDS

if TYPE_CHECKING:
    from waterlang.parser import Parser


def _parse_target(parser: 'Parser', context: str) -> str:
    """
    Parse the variable name a ``define`` or ``set`` binds.

    Args:
        parser: The parser instance.
        context (str): The form being parsed.

    Returns:
        str: The variable name.
    """
    token = parser.expect(VAR, context)
    if token.value in RESERVED_WORDS:
        parser.errorf(f"cannot use the reserved word {token.value} as a variable in {context}")
    return token.value


def _parse_operand(parser: 'Parser', context: str) -> nodes.Node:
    """
    Parse one required sub-expression of a special form.
    """
    token = parser.peek()
    if token.type in (RPAREN, EOF):
        parser.errorf(f"missing expression in {context}; got {token}", token.line)
    return parser.expression()


def _is_plain_name(text: str) -> bool:
    """
    Whether ``text`` would lex as a variable outside of call position.
    """
    if text[0] in DIGITS or text[0] in QUOTES or text[0] == '#':
        return False
    if text[0] in '+-' and len(text) > 1 and text[1] in DIGITS:
        return False
    return text not in RESERVED_WORDS


def parse_define(parser: 'Parser') -> nodes.Define:
    """
    Parse a definition of a new variable in the current scope.

    Syntax:
        (define <var> <expression>)

    Args:
        parser: The parser instance.

    Returns:
        nodes.Define
    """
    tok = parser.expect(DEFINE, 'define')
    name = _parse_target(parser, 'define')
    value = _parse_operand(parser, 'define')
    parser.expect(RPAREN, 'define')
    return nodes.Define(name, value, tok.line)


def parse_set(parser: 'Parser') -> nodes.Set:
    """
    Parse an assignment to an existing variable.

    Syntax:
        (set <var> <expression>)
    """
    tok = parser.expect(CALL, 'set')
    name = _parse_target(parser, 'set')
    value = _parse_operand(parser, 'set')
    parser.expect(RPAREN, 'set')
    return nodes.Set(name, value, tok.line)


def parse_if(parser: 'Parser') -> nodes.If:
    """
    Parse a conditional. All three sub-expressions are required.

    Syntax:
        (if <test> <consequence> <alternative>)
    """
    tok = parser.expect(CALL, 'if')
    test = _parse_operand(parser, 'if')
    conseq = _parse_operand(parser, 'if')
    alt = _parse_operand(parser, 'if')
    parser.expect(RPAREN, 'if')
    return nodes.If(test, conseq, alt, tok.line)


def parse_begin(parser: 'Parser') -> nodes.Begin:
    """
    Parse a sequence of expressions.

    Syntax:
        (begin <expression>+)
    """
    tok = parser.expect(CALL, 'begin')
    body = []
    while parser.peek().type not in (RPAREN, EOF):
        body.append(parser.expression())
    parser.expect(RPAREN, 'begin')
    if not body:
        parser.errorf("begin sentence without expressions", tok.line)
    return nodes.Begin(tuple(body), tok.line)


def parse_lambda(parser: 'Parser') -> nodes.Lambda:
    """
    Parse a lambda literal. The body is a single call.

    Syntax:
        (lambda (<name>+) (<call>))
    """
    tok = parser.expect(CALL, 'lambda')
    parser.expect(LPAREN, 'lambda')

    # The first parameter sits in call position, the rest are variables
    params = [parser.expect(CALL, 'lambda parameters').value]
    while parser.peek().type != RPAREN:
        params.append(parser.expect(VAR, 'lambda parameters').value)
    parser.expect(RPAREN, 'lambda parameters')

    for name in params:
        if not _is_plain_name(name):
            parser.errorf(f"illegal lambda parameter name: {name}", tok.line)
    if len(set(params)) != len(params):
        parser.errorf("duplicated lambda parameter name", tok.line)

    if parser.peek().type != LPAREN:
        parser.errorf(f"lambda body must be a call; got {parser.peek()}", tok.line)
    body = parser.parse_call()
    if not isinstance(body, nodes.Call):
        parser.errorf("lambda body must be a call, not a special form", tok.line)
    parser.expect(RPAREN, 'lambda')
    return nodes.Lambda(tuple(params), body, tok.line)
