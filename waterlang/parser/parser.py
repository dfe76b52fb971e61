"""
Main parser entry point for water.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process over a lazily produced token stream. One token of
look-ahead (`peek`) and a one-slot pushback (`backup`) are all the grammar
needs. The literal and special form routines live in
`waterlang.parser.literals` and `waterlang.parser.forms`.

Grammar:
    program     := expression* EOF
    expression  := number | string | bool | var | '(' call ')'
    call        := 'define' var expression
                 | 'set' var expression
                 | 'if' expression expression expression
                 | 'begin' expression+
                 | 'lambda' '(' name+ ')' '(' call ')'
                 | name expression*


File: parser.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import logging

from waterlang import nodes
from waterlang.exceptions import LexError, ParseError
from waterlang.lexer import (
    BOOL,
    CALL,
    DEFINE,
    DISPLAY_NAMES,
    EOF,
    ERROR,
    LPAREN,
    NUMBER,
    RPAREN,
    STRING,
    VAR,
    TokenStream,
)

from . import forms as _forms
from . import literals as _lit

logger = logging.getLogger(__name__)

SPECIAL_FORMS = {
    'set': _forms.parse_set,
    'if': _forms.parse_if,
    'begin': _forms.parse_begin,
    'lambda': _forms.parse_lambda,
}


class Parser:
    """water parser."""

    def __init__(self, stream, file: str = '<stdin>'):
        """
        Initialize the parser over a token source.

        Parameters:
            stream: Anything with a ``next()`` method returning tokens, such
                as a :class:`waterlang.lexer.TokenStream`.
            file (str): The name of the script, used in error messages.
        """
        self.stream = stream
        self.source_file = file
        self.token = None
        self.stored = False

    def next(self):
        """
        Return the next token, honouring a previous :meth:`backup`.

        Raises:
            LexError: If the lexer reported malformed input.
        """
        if self.stored:
            self.stored = False
            return self.token
        self.token = self.stream.next()
        if self.token.type == ERROR:
            raise LexError(self.token.value, self.token.line, self.source_file)
        return self.token

    def backup(self) -> None:
        self.stored = True

    def peek(self):
        token = self.next()
        self.backup()
        return token

    def errorf(self, message: str, line=None):
        """
        Abort the parse with a syntax error.

        Raises:
            ParseError: Always.
        """
        if line is None and self.token is not None:
            line = self.token.line
        raise ParseError(message, line, self.source_file)

    def expect(self, token_type: str, context: str):
        """
        Consume the next token if it matches the expected type.

        Parameters:
            token_type (str): The expected token type.
            context (str): The construct being parsed, for the error message.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        token = self.next()
        if token.type != token_type:
            self.errorf(
                f"expected {DISPLAY_NAMES[token_type]} in {context}; got {token}",
                token.line,
            )
        return token

    # Literal wrappers
    def parse_number(self) -> nodes.Number:
        """
        Parse a numeric literal.
        """
        return _lit.parse_number(self)

    def parse_string(self) -> nodes.String:
        """
        Parse a quoted string literal.
        """
        return _lit.parse_string(self)

    def parse_bool(self) -> nodes.Bool:
        """
        Parse a ``#t`` or ``#f`` literal.
        """
        return _lit.parse_bool(self)

    def parse_var(self) -> nodes.Var:
        """
        Parse a variable reference.
        """
        token = self.expect(VAR, 'var')
        return nodes.Var(token.value, token.line)

    # Form wrappers
    def parse_define(self) -> nodes.Define:
        """
        Parse a ``define`` form.
        """
        return _forms.parse_define(self)

    def parse_call(self) -> nodes.Node:
        """
        Parse a parenthesized call, dispatching the special forms.
        """
        self.expect(LPAREN, 'call')
        token = self.peek()
        if token.type == DEFINE:
            return self.parse_define()
        if token.type == CALL and token.value in SPECIAL_FORMS:
            return SPECIAL_FORMS[token.value](self)

        name = self.expect(CALL, 'call')
        args = []
        while True:
            token = self.peek()
            if token.type == RPAREN:
                self.next()
                return nodes.Call(name.value, tuple(args), name.line)
            if token.type == EOF:
                self.errorf(f"eof not expected inside the call to {name.value}", name.line)
            args.append(self.expression())

    def expression(self) -> nodes.Node:
        """
        Parse a single expression.
        """
        token = self.peek()
        if token.type == NUMBER:
            return self.parse_number()
        if token.type == STRING:
            return self.parse_string()
        if token.type == LPAREN:
            return self.parse_call()
        if token.type == BOOL:
            return self.parse_bool()
        if token.type == VAR:
            return self.parse_var()
        return self.errorf(f"cannot use this kind of value as an expression: {token}", token.line)

    def parse(self) -> nodes.Program:
        """
        Parse the full input into a program.

        Raises:
            ParseError: Also when the input nests deeper than the Python
                stack allows.
        """
        children = []
        try:
            while self.peek().type != EOF:
                children.append(self.expression())
        except RecursionError as e:
            line = self.token.line if self.token is not None else None
            raise ParseError("maximum nesting depth exceeded", line, self.source_file) from e
        logger.debug("parsed %d top-level expressions from %s", len(children), self.source_file)
        return nodes.Program(tuple(children))


def parse(source: str, file: str = '<stdin>') -> nodes.Program:
    """
    Parse source text into a program.

    The lexer runs concurrently and is shut down however the parse ends. No
    partial tree is ever returned.

    Raises:
        LexError: If the source contains a malformed token.
        ParseError: If the tokens do not match the grammar.
    """
    with TokenStream(source) as stream:
        return Parser(stream, file).parse()
