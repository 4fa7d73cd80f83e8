"""Tests for the character cursor."""

import pytest

from zapscript.core import ScriptReader
from zapscript.errors import InvalidEncodingError, ParseError
from zapscript.names import EOF


def test_read_until_eof() -> None:
    """Read every rune, then the end marker repeatedly."""
    reader = ScriptReader('añ')

    assert reader.read() == 'a'
    assert reader.read() == 'ñ'
    assert reader.pos == 2

    assert reader.read() == EOF
    assert reader.read() == EOF
    assert reader.pos == 2


def test_peek_does_not_consume() -> None:
    """Peek the next rune without advancing."""
    reader = ScriptReader('→x')

    assert reader.peek() == '→'
    assert reader.peek() == '→'
    assert reader.pos == 0

    reader.skip()

    assert reader.peek() == 'x'
    assert reader.pos == 1


def test_unread_single_rune() -> None:
    """Push back exactly one rune."""
    reader = ScriptReader('ab')

    reader.read()
    reader.read()
    reader.unread()

    assert reader.pos == 1
    assert reader.read() == 'b'


def test_unread_twice() -> None:
    """Refuse a second pushback in a row."""
    reader = ScriptReader('ab')

    reader.read()
    reader.unread()

    with pytest.raises(ParseError, match=r'^nothing to unread'):
        reader.unread()


def test_unread_after_eof() -> None:
    """Refuse pushing back the end marker."""
    reader = ScriptReader('')

    assert reader.read() == EOF

    with pytest.raises(ParseError, match=r'^nothing to unread'):
        reader.unread()


@pytest.mark.parametrize('text, expected, rest', (
    pytest.param('|', True, '', id='single separator at end'),
    pytest.param('||x', True, 'x', id='double separator'),
    pytest.param('|x', False, 'x', id='single separator inside'),
))
def test_check_end_of_cmd(text: str, expected: bool, rest: str) -> None:
    """Detect chain terminators after a separator."""
    reader = ScriptReader(text)

    assert reader.check_end_of_cmd(reader.read()) is expected
    assert reader.source[reader.pos:] == rest


def test_consume_to_end_of_cmd() -> None:
    """Consume one chain segment, keeping single separators."""
    reader = ScriptReader('a|b c||next')

    assert reader.consume_to_end_of_cmd() == 'a|b c'
    assert reader.source[reader.pos:] == 'next'


def test_bytes_input() -> None:
    """Decode UTF-8 bytes."""
    reader = ScriptReader('**echo:ü'.encode())

    assert reader.source == '**echo:ü'


def test_invalid_bytes_input() -> None:
    """Reject malformed UTF-8 with the byte offset."""
    with pytest.raises(InvalidEncodingError, match=r'^invalid UTF-8 input at byte 3') as error:
        ScriptReader(b'abc\xff')

    assert error.value.position == 3


def test_lone_surrogate() -> None:
    """Reject lone surrogates when they are read."""
    reader = ScriptReader('a\ud800')
    reader.read()

    with pytest.raises(InvalidEncodingError):
        reader.read()
