"""Tests for escape, quoted and JSON literal scanners."""

import pytest

from zapscript.core import ScriptParser
from zapscript.errors import InvalidJSONError, UnmatchedQuoteError


@pytest.mark.parametrize('text, expected', (
    pytest.param('n', '\n', id='newline'),
    pytest.param('r', '\r', id='carriage return'),
    pytest.param('t', '\t', id='tab'),
    pytest.param('^', '^', id='introducer'),
    pytest.param('"', '"', id='double quote'),
    pytest.param("'", "'", id='single quote'),
    pytest.param('x', 'x', id='unknown escape'),
    pytest.param(',', ',', id='separator'),
    pytest.param('', None, id='end of input'),
))
def test_parse_escape_seq(text: str, expected: str | None) -> None:
    """Decode the rune following an escape introducer."""
    assert ScriptParser(text).parse_escape_seq() == expected


def test_read_escaped_at_eof() -> None:
    """Keep a bare introducer at the end of input."""
    assert ScriptParser('').read_escaped() == '^'


@pytest.mark.parametrize('text, quote, expected, rest', (
    pytest.param('hello"rest', '"', 'hello', 'rest', id='double quoted'),
    pytest.param("it^'s'", "'", "it's", '', id='escaped quote'),
    pytest.param('a,b|c"', '"', 'a,b|c', '', id='separators are content'),
    pytest.param('say "hi"\'', "'", 'say "hi"', '', id='other quote is content'),
    pytest.param('x[[y]]"', '"', 'x\ue000y\ue001', '', id='expression inside'),
))
def test_parse_quoted_arg(text: str, quote: str, expected: str, rest: str) -> None:
    """Read a quoted literal up to its closing quote."""
    parser = ScriptParser(text)

    assert parser.parse_quoted_arg(quote) == expected
    assert parser.source[parser.pos:] == rest


def test_unmatched_quote() -> None:
    """Fail when the closing quote is missing."""
    with pytest.raises(UnmatchedQuoteError, match=r'^unmatched quote'):
        ScriptParser('never closed').parse_quoted_arg('"')


@pytest.mark.parametrize('text, expected', (
    pytest.param('"a": 1}', '{"a":1}', id='minified'),
    pytest.param('"text":"{not json}"}', '{"text":"{not json}"}', id='braces in string'),
    pytest.param(r'"q":"a\"}b"}', r'{"q":"a\"}b"}', id='escaped quote in string'),
    pytest.param('"b": 2, "a": [1, {"c": null}]}', '{"b":2,"a":[1,{"c":null}]}', id='nested keeps order'),
    pytest.param('"s": "ü"}', '{"s":"ü"}', id='non ascii'),
    pytest.param('"a": 1.0, "b": 1e2, "c": 3}', '{"a":1.0,"b":100.0,"c":3}', id='number spelling'),
))
def test_parse_json_arg(text: str, expected: str) -> None:
    """Extract and canonicalize an embedded JSON value."""
    assert ScriptParser(text).parse_json_arg() == expected


@pytest.mark.parametrize('text', (
    pytest.param('"a": 1', id='unbalanced'),
    pytest.param('a: 1}', id='malformed'),
    pytest.param('"a": NaN}', id='non standard constant'),
    pytest.param('"a":' + '[' * 128 + ']' * 128 + '}', id='nested too deep'),
))
def test_invalid_json_arg(text: str) -> None:
    """Fail on unterminated or malformed JSON."""
    with pytest.raises(InvalidJSONError, match=r'^invalid JSON argument'):
        ScriptParser(text).parse_json_arg()


def test_json_arg_stops_at_balance() -> None:
    """Leave the text following a balanced value unread."""
    parser = ScriptParser('"a":{"b":1}},next')

    assert parser.parse_json_arg() == '{"a":{"b":1}}'
    assert parser.source[parser.pos:] == ',next'


def test_json_arg_depth_limit() -> None:
    """Accept values nested up to the depth limit."""
    text = '"a":' + '[' * 127 + ']' * 127 + '}'

    assert ScriptParser(text).parse_json_arg() == '{"a":' + '[' * 127 + ']' * 127 + '}'


def test_json_arg_depth_error() -> None:
    """Name the depth limit when a value nests too deep."""
    with pytest.raises(InvalidJSONError, match=r'^invalid JSON argument: nested deeper than 128 levels'):
        ScriptParser('[' * 200).parse_json_arg()
