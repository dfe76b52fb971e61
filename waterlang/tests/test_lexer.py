"""
Tests for the water lexer and the concurrent token stream.
"""
import pytest

from waterlang.lexer import (
    BOOL,
    CALL,
    DEFINE,
    EOF,
    ERROR,
    LPAREN,
    NUMBER,
    RPAREN,
    STRING,
    VAR,
    Lexer,
    TokenStream,
    tokenize,
)


def types_and_values(source: str):
    return [(t.type, t.value) for t in tokenize(source)]


def test_call_with_signed_numbers():
    """
    A sign followed by a digit starts a number.
    """
    assert types_and_values("(+ 1 -2 +3)") == [
        (LPAREN, "("),
        (CALL, "+"),
        (NUMBER, "1"),
        (NUMBER, "-2"),
        (NUMBER, "+3"),
        (RPAREN, ")"),
        (EOF, ""),
    ]


def test_sign_without_digit_is_a_name():
    """
    A sign that is not followed by a digit belongs to a name.
    """
    assert types_and_values("(- x) (f -x +)") == [
        (LPAREN, "("),
        (CALL, "-"),
        (VAR, "x"),
        (RPAREN, ")"),
        (LPAREN, "("),
        (CALL, "f"),
        (VAR, "-x"),
        (VAR, "+"),
        (RPAREN, ")"),
        (EOF, ""),
    ]


def test_hex_numbers():
    assert types_and_values("0x1F -0Xff") == [
        (NUMBER, "0x1F"),
        (NUMBER, "-0Xff"),
        (EOF, ""),
    ]


def test_number_followed_by_letters_is_an_error():
    tokens = tokenize("12abc")
    assert len(tokens) == 1
    assert tokens[0].type == ERROR
    assert tokens[0].value.startswith("bad number syntax")


def test_define_has_its_own_token_type():
    assert types_and_values("(define x 1)") == [
        (LPAREN, "("),
        (DEFINE, "define"),
        (VAR, "x"),
        (NUMBER, "1"),
        (RPAREN, ")"),
        (EOF, ""),
    ]


def test_define_prefix_is_an_ordinary_call():
    assert types_and_values("(definex 1)")[1] == (CALL, "definex")


def test_strings_keep_their_quotes_and_escapes():
    assert types_and_values("\"a \\\" b\" 'c'") == [
        (STRING, "\"a \\\" b\""),
        (STRING, "'c'"),
        (EOF, ""),
    ]


def test_unterminated_string_is_an_error():
    tokens = tokenize("(print \"abc")
    assert tokens[-1].type == ERROR
    assert tokens[-1].value == "eof not expected inside a string"


def test_empty_call_is_an_error():
    assert types_and_values("()") == [
        (LPAREN, "("),
        (ERROR, "illegal function name"),
    ]


def test_unterminated_call_name_is_an_error():
    assert types_and_values("(f")[-1] == (ERROR, "eof not expected inside a call")


def test_variable_may_end_the_input():
    assert types_and_values("x") == [(VAR, "x"), (EOF, "")]


def test_booleans():
    assert types_and_values("#t #f") == [(BOOL, "#t"), (BOOL, "#f"), (EOF, "")]


def test_non_ascii_identifiers():
    assert types_and_values("(println ñandú)")[2] == (VAR, "ñandú")


def test_whitespace_and_comments_are_discarded():
    source = "; leading comment\n(f\t1)\r\n; trailing"
    assert types_and_values(source) == [
        (LPAREN, "("),
        (CALL, "f"),
        (NUMBER, "1"),
        (RPAREN, ")"),
        (EOF, ""),
    ]


def test_line_numbers():
    tokens = tokenize("(f\n  1\n  \"a\nb\" 2)")
    assert [(t.value, t.line) for t in tokens[:5]] == [
        ("(", 1),
        ("f", 1),
        ("1", 2),
        ("\"a\nb\"", 3),
        ("2", 4),
    ]


def test_token_spans_relex_to_the_same_text():
    """
    Re-lexing the span recorded for a token reproduces its text.
    """
    source = "(define x -12)\n(if #t (+ x 0x10) 'str')  (set x \"y\")"
    for token in tokenize(source):
        if token.type in (EOF, ERROR):
            continue
        span = source[token.pos:token.end]
        assert span.strip() == token.value
        assert tokenize(span)[0].value == token.value


def test_lexer_stops_after_error():
    lexer = Lexer("12abc (f 1)")
    tokens = list(lexer.tokens())
    assert [t.type for t in tokens] == [ERROR]
    assert lexer.state is None


def test_token_stream_delivers_tokens_in_order():
    source = "(f 1 \"two\" #t)"
    with TokenStream(source) as stream:
        streamed = [(t.type, t.value) for t in stream]
    assert streamed == types_and_values(source)


def test_token_stream_repeats_terminal_token():
    with TokenStream("x") as stream:
        assert stream.next().type == VAR
        assert stream.next().type == EOF
        assert stream.next().type == EOF


def test_abandoned_token_stream_releases_the_producer():
    """
    Closing the stream early lets the blocked lexer thread finish.
    """
    stream = TokenStream("(f " + "1 " * 500 + ")", poll_interval=0.01)
    assert stream.next().type == LPAREN
    stream.close()
    stream._thread.join(timeout=5)
    assert not stream._thread.is_alive()


def test_producer_failure_is_raised_in_the_consumer(monkeypatch):
    """
    An unexpected exception in the lexer thread is an interpreter bug and
    surfaces unchanged on the parser side.
    """
    def broken(self):
        raise RuntimeError("broken state")

    monkeypatch.setattr(Lexer, "lex_number", broken)
    with pytest.raises(RuntimeError, match="broken state"):
        list(TokenStream("42"))


def test_variable_name_stops_at_open_paren():
    assert types_and_values("(f a(g))") == [
        (LPAREN, "("),
        (CALL, "f"),
        (VAR, "a"),
        (LPAREN, "("),
        (CALL, "g"),
        (RPAREN, ")"),
        (RPAREN, ")"),
        (EOF, ""),
    ]
