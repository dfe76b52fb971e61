"""
Tests for the water parser.
"""
import pytest

from waterlang import nodes
from waterlang.exceptions import LexError, ParseError
from waterlang.parser import Parser
from waterlang.lexer import TokenStream

from waterlang.tests.utils import parse_source


def only(source: str) -> nodes.Node:
    program = parse_source(source)
    assert len(program.children) == 1
    return program.children[0]


def test_program_ast():
    program = parse_source("(define x 10)(if #t (+ x 5) 0)")
    assert program == nodes.Program((
        nodes.Define("x", nodes.Number("10", 10)),
        nodes.If(
            nodes.Bool(True),
            nodes.Call("+", (nodes.Var("x"), nodes.Number("5", 5))),
            nodes.Number("0", 0),
        ),
    ))


def test_empty_program():
    assert parse_source("  ; nothing here\n") == nodes.Program(())


def test_nodes_record_lines():
    program = parse_source("1\n(f\n x)")
    call = program.children[1]
    assert call.line == 2
    assert call.args[0].line == 3


@pytest.mark.parametrize("text, value", [
    ("42", 42),
    ("-5", -5),
    ("+7", 7),
    ("0x1F", 31),
    ("-0x10", -16),
    ("0", 0),
    ("-0", 0),
    ("007", 7),
    ("9223372036854775807", 9223372036854775807),
    ("-9223372036854775807", -9223372036854775807),
])
def test_number_literals(text, value):
    node = only(text)
    assert isinstance(node, nodes.Number)
    assert node.text == text
    assert node.value == value


@pytest.mark.parametrize("text", ["9223372036854775808", "-9223372036854775808", "0x", "0x8000000000000000"])
def test_numbers_out_of_range_are_rejected(text):
    with pytest.raises(ParseError, match="illegal number syntax"):
        parse_source(text)


def test_number_unsigned_reading():
    assert nodes.Number("7", 7).unsigned == 7
    assert nodes.Number("-1", -1).unsigned == (1 << 64) - 1


def test_string_literals_are_unquoted():
    assert only("\"a\\nb\"") == nodes.String("a\nb")
    assert only("'single'") == nodes.String("single")
    assert only("\"say \\\"hi\\\"\"") == nodes.String("say \"hi\"")
    assert only("\"ñandú\"") == nodes.String("ñandú")
    assert only("\"\\u00e9\\x41\"") == nodes.String("éA")


def test_malformed_escape_is_rejected():
    with pytest.raises(ParseError, match="cannot unquote the string literal"):
        parse_source("\"\\x4\"")


def test_bool_literals():
    assert only("#t") == nodes.Bool(True)
    assert only("#f") == nodes.Bool(False)
    with pytest.raises(ParseError, match="incorrect boolean value"):
        parse_source("#true")


def test_set_and_begin():
    assert only("(set x (begin 1 2))") == nodes.Set(
        "x", nodes.Begin((nodes.Number("1", 1), nodes.Number("2", 2)))
    )


def test_empty_begin_is_rejected():
    with pytest.raises(ParseError, match="begin sentence without expressions"):
        parse_source("(begin)")


def test_if_requires_three_expressions():
    with pytest.raises(ParseError, match="missing expression in if"):
        parse_source("(if #t 1)")
    with pytest.raises(ParseError, match="expected \\) in if"):
        parse_source("(if #t 1 2 3)")


def test_define_target_must_be_a_variable():
    with pytest.raises(ParseError, match="expected variable in define"):
        parse_source("(define 1 2)")
    with pytest.raises(ParseError, match="expected variable in set"):
        parse_source("(set (f) 2)")
    with pytest.raises(ParseError, match="reserved word"):
        parse_source("(define if 2)")


def test_lambda_literal():
    assert only("(lambda (x y) (+ x y))") == nodes.Lambda(
        ("x", "y"), nodes.Call("+", (nodes.Var("x"), nodes.Var("y")))
    )


def test_lambda_body_must_be_a_call():
    with pytest.raises(ParseError, match="lambda body must be a call"):
        parse_source("(lambda (x) x)")
    with pytest.raises(ParseError, match="lambda body must be a call"):
        parse_source("(lambda (x) (if #t 1 2))")


def test_lambda_parameters_are_checked():
    with pytest.raises(ParseError, match="duplicated lambda parameter"):
        parse_source("(lambda (x x) (f x))")
    with pytest.raises(ParseError, match="illegal lambda parameter name"):
        parse_source("(lambda (1) (f))")
    with pytest.raises(ParseError, match="expected variable in lambda parameters"):
        parse_source("(lambda (x 2) (f))")


def test_unterminated_call():
    with pytest.raises(ParseError, match="eof not expected inside the call to f"):
        parse_source("(f 1")


def test_stray_closing_paren():
    with pytest.raises(ParseError, match="cannot use this kind of value as an expression"):
        parse_source("1 )")


def test_lexical_errors_abort_the_parse():
    with pytest.raises(LexError, match="bad number syntax"):
        parse_source("(f 12abc)")
    with pytest.raises(LexError, match="illegal function name"):
        parse_source("(f ())")


def test_error_reports_line_and_file():
    with pytest.raises(ParseError) as excinfo:
        parse_source("(f 1)\n\n(begin)")
    assert excinfo.value.line == 3
    assert excinfo.value.file == "<test>"
    assert str(excinfo.value) == "begin sentence without expressions on line 3 in <test>"


def test_parser_accepts_any_token_source():
    """
    The parser only needs an object with a next() method.
    """
    with TokenStream("(f 1)") as stream:
        program = Parser(stream, "<test>").parse()
    assert program == nodes.Program((nodes.Call("f", (nodes.Number("1", 1),)),))


def test_supported_escapes():
    assert only("\"\\101\\t\\'\\\\\"") == nodes.String("A\t'\\")
    assert only("'\\U0001F600 \\a\\v'") == nodes.String("\U0001F600 \a\v")


@pytest.mark.parametrize("literal", [
    "\"\\q\"",
    "\"\\日\"",
    "\"\\0\"",
    "\"\\400\"",
    "\"\\ud800\"",
])
def test_unknown_escapes_are_rejected(literal):
    with pytest.raises(ParseError, match="cannot unquote the string literal"):
        parse_source(literal)


def test_escape_before_non_latin_character_is_not_mangled():
    with pytest.raises(ParseError, match="invalid escape sequence \\\\日"):
        parse_source("\"\\日\"")
    assert only("\"日本\"") == nodes.String("日本")


def test_deep_nesting_is_a_parse_error():
    source = "(+ 1 " * 3000 + "1" + ")" * 3000
    with pytest.raises(ParseError, match="maximum nesting depth exceeded"):
        parse_source(source)
