"""Lexer for water.

The lexer is an explicit state machine. Each state is a method that consumes
input through :meth:`Lexer.next`, optionally looks ahead with
:meth:`Lexer.peek` or steps back one character with :meth:`Lexer.backup`,
emits zero or more tokens and returns the next state. Scanning stops after
the ``EOF`` token or after the first ``ERROR`` token.

Input is consumed one character (code point) at a time, so identifiers may
contain any non-ASCII letters.

1. Policies
- Whitespace (space, tab, CR, LF) separates tokens and is discarded, as is a
  ``;`` comment running to the end of the line.
- A leading ``+`` or ``-`` starts a number only when a digit follows it,
  otherwise it is part of a name: ``(- x)`` is a call, ``-5`` a literal.
- Numbers take an optional sign, decimal digits or a ``0x``/``0X`` prefix
  followed by hex digits, and must not run into another name character.
- Strings are delimited by single or double quotes. Escapes are left to the
  parser.
- ``define`` in call position has its own token type.
- Call names and variable names run up to whitespace or either
  parenthesis, so ``x(f)`` is a variable followed by a call.

2. Concurrency
:class:`TokenStream` runs the state machine in a producer thread and hands
tokens to the parser through a one-slot queue, so tokens are only scanned as
fast as the parser asks for them.


File: lexer.py
Author: Chris Rowles <christopher.rowles@outlook.com>
Copyright: © 2025 Chris Rowles. All rights reserved.
Version: 0.1.1
License: MIT
"""

import logging
import queue
import threading
from collections import deque

logger = logging.getLogger(__name__)

# Token types
ERROR = 'ERROR'
EOF = 'EOF'
LPAREN = 'LPAREN'
RPAREN = 'RPAREN'
CALL = 'CALL'
NUMBER = 'NUMBER'
STRING = 'STRING'
VAR = 'VAR'
DEFINE = 'DEFINE'
BOOL = 'BOOL'

TERMINAL_TYPES = (EOF, ERROR)

DISPLAY_NAMES = {
    ERROR: 'ERROR',
    EOF: 'EOF',
    LPAREN: '(',
    RPAREN: ')',
    CALL: 'call',
    NUMBER: 'number',
    STRING: 'string',
    VAR: 'variable',
    DEFINE: 'define',
    BOOL: 'bool',
}

END_OF_INPUT = None

DIGITS = '0123456789'
HEX_DIGITS = DIGITS + 'abcdefABCDEF'
SPACES = ' \t\r\n'
QUOTES = '"\''


class Token:
    """
    Represents a lexical token with a type and value.
    """
    def __init__(self, type_, value, line, pos=0, end=0):
        """
        Initialize a new token.

        Parameters:
            type_ (str): The token type.
            value (str): The source text of the token, or the message of an
                ``ERROR`` token.
            line (int): The line the token starts on.
            pos (int): Offset of the first character of the token.
            end (int): Offset just past the last character of the token.
        """
        self.type = type_
        self.value = value
        self.line = line
        self.pos = pos
        self.end = end

    def __repr__(self) -> str:
        """
        Return a string representation of the token.
        """
        return f"Token({self.type}, {self.value}, line={self.line})"

    def __str__(self) -> str:
        return f"{DISPLAY_NAMES.get(self.type, self.type)} => {self.value}"


def is_space(r) -> bool:
    return r is not END_OF_INPUT and r in SPACES


def is_digit(r) -> bool:
    return r is not END_OF_INPUT and r in DIGITS


def is_alphanumeric(r) -> bool:
    return r is not END_OF_INPUT and (r == '_' or r.isalpha() or r.isdigit())


def ends_name(r) -> bool:
    """
    Names run up to the next whitespace, parenthesis or the end of input.
    """
    return r is END_OF_INPUT or r in SPACES or r in '()'


class Lexer:
    """
    State machine turning source text into tokens.
    """

    def __init__(self, source: str):
        self.source = source
        self.start = 0
        self.pos = 0
        self.width = 0
        self.line = 1
        self.state = self.lex_code
        self._pending = deque()

    def tokens(self):
        """
        Run the state machine, yielding tokens as they are emitted.
        """
        while self.state is not None:
            self.state = self.state()
            while self._pending:
                yield self._pending.popleft()

    # ------------------------------------------------------------------
    # Input primitives
    # ------------------------------------------------------------------

    def next(self):
        """
        Consume and return the next character, or ``END_OF_INPUT``.
        """
        if self.pos >= len(self.source):
            self.width = 0
            return END_OF_INPUT
        r = self.source[self.pos]
        self.width = 1
        self.pos += 1
        return r

    def backup(self) -> None:
        """
        Step back over the last character returned by :meth:`next`.
        """
        self.pos -= self.width

    def peek(self):
        r = self.next()
        self.backup()
        return r

    def ignore(self) -> None:
        self.line += self.source.count('\n', self.start, self.pos)
        self.start = self.pos

    def accept(self, valid: str) -> bool:
        r = self.next()
        if r is not END_OF_INPUT and r in valid:
            return True
        self.backup()
        return False

    def accept_run(self, valid: str) -> None:
        while self.accept(valid):
            pass

    def emit(self, type_: str) -> None:
        token = Token(type_, self.source[self.start:self.pos], self.line, self.start, self.pos)
        logger.debug("emit %r", token)
        self._pending.append(token)
        self.ignore()

    def errorf(self, message: str):
        """
        Emit an ``ERROR`` token and stop the state machine.
        """
        token = Token(ERROR, message, self.line, self.start, self.pos)
        logger.debug("emit %r", token)
        self._pending.append(token)
        return None

    def scan_number(self) -> bool:
        self.accept('+-')
        digits = DIGITS
        if self.accept('0') and self.accept('xX'):
            digits = HEX_DIGITS
        self.accept_run(digits)
        if is_alphanumeric(self.peek()):
            self.next()
            return False
        return True

    def scan_name(self) -> None:
        while not ends_name(self.peek()):
            self.next()

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def lex_code(self):
        r = self.next()
        if r is END_OF_INPUT:
            self.emit(EOF)
            return None
        if is_space(r):
            self.ignore()
            return self.lex_code
        if r == ';':
            return self.lex_comment
        if r in '+-':
            if is_digit(self.peek()):
                self.backup()
                return self.lex_number
            self.backup()
            return self.lex_var
        if is_digit(r):
            self.backup()
            return self.lex_number
        if r == ')':
            return self.lex_right_paren
        if r == '(':
            return self.lex_left_paren
        if r in QUOTES:
            self.backup()
            return self.lex_string
        if r == '#':
            self.backup()
            return self.lex_bool
        self.backup()
        return self.lex_var

    def lex_comment(self):
        while True:
            r = self.next()
            if r is END_OF_INPUT or r == '\n':
                break
        self.ignore()
        return self.lex_code

    def lex_left_paren(self):
        self.emit(LPAREN)
        return self.lex_call

    def lex_right_paren(self):
        self.emit(RPAREN)
        return self.lex_code

    def lex_call(self):
        while is_space(self.peek()):
            self.next()
        self.ignore()

        if self.source.startswith('define', self.pos):
            after = self.pos + len('define')
            if after >= len(self.source) or ends_name(self.source[after]):
                self.pos = after
                self.emit(DEFINE)
                return self.lex_code

        self.scan_name()
        if self.peek() is END_OF_INPUT:
            return self.errorf("eof not expected inside a call")
        if self.start == self.pos:
            return self.errorf("illegal function name")
        self.emit(CALL)
        return self.lex_code

    def lex_var(self):
        self.scan_name()
        if self.start == self.pos:
            return self.errorf("illegal variable name")
        self.emit(VAR)
        return self.lex_code

    def lex_number(self):
        if not self.scan_number():
            return self.errorf(f"bad number syntax: {self.source[self.start:self.pos]}")
        self.emit(NUMBER)
        return self.lex_code

    def lex_string(self):
        delim = self.next()
        while True:
            r = self.next()
            if r == '\\':
                if self.next() is END_OF_INPUT:
                    return self.errorf("eof not expected inside a string")
                continue
            if r is END_OF_INPUT:
                return self.errorf("eof not expected inside a string")
            if r == delim:
                break
        self.emit(STRING)
        return self.lex_code

    def lex_bool(self):
        self.next()
        self.scan_name()
        self.emit(BOOL)
        return self.lex_code


def tokenize(source: str) -> list[Token]:
    """
    Convert a string of source code into a list of tokens.

    The list always ends with an ``EOF`` or an ``ERROR`` token.
    """
    return list(Lexer(source).tokens())


class _ProducerFailure:
    """Carries an unexpected exception from the producer thread."""

    def __init__(self, exc: BaseException):
        self.exc = exc


class TokenStream:
    """
    Tokens produced lazily by a lexer running in its own thread.

    The producer blocks until the consumer takes each token. A consumer that
    stops early must call :meth:`close`; the producer notices within
    ``poll_interval`` seconds and exits without emitting anything else.
    """

    def __init__(self, source: str, poll_interval: float = 0.05):
        self.poll_interval = poll_interval
        self._queue = queue.Queue(maxsize=1)
        self._closed = threading.Event()
        self._last = None
        self._thread = threading.Thread(
            target=self._produce,
            args=(Lexer(source),),
            name='water-lexer',
            daemon=True,
        )
        self._thread.start()

    def _produce(self, lexer: Lexer) -> None:
        try:
            for token in lexer.tokens():
                if not self._put(token):
                    return
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._put(_ProducerFailure(exc))

    def _put(self, item) -> bool:
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=self.poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def next(self) -> Token:
        """
        Return the next token, blocking until the lexer produces it.

        Once a terminal token has been returned it is returned again on every
        later call.
        """
        if self._last is not None and self._last.type in TERMINAL_TYPES:
            return self._last
        item = self._queue.get()
        if isinstance(item, _ProducerFailure):
            self.close()
            raise item.exc
        self._last = item
        return item

    def close(self) -> None:
        self._closed.set()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __iter__(self):
        while True:
            token = self.next()
            yield token
            if token.type in TERMINAL_TYPES:
                return

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
