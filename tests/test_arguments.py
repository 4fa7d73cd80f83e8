"""Tests for command, positional, advanced and input macro scanners."""

import pytest

from zapscript.core import Fallback, ScriptParser
from zapscript.errors import (
    EmptyCommandNameError,
    InvalidJSONError,
    UnmatchedInputMacroExtError,
    UnmatchedQuoteError,
)


@pytest.mark.parametrize('text, expected, rest', (
    pytest.param('key=value', {'key': 'value'}, '', id='single pair'),
    pytest.param('a=1&b=2', {'a': '1', 'b': '2'}, '', id='several pairs'),
    pytest.param('flag', {'flag': ''}, '', id='key only'),
    pytest.param('a=1&flag&b=', {'a': '1', 'flag': '', 'b': ''}, '', id='mixed shorthand'),
    pytest.param('Mixed_Case=1', {'Mixed_Case': '1'}, '', id='keys keep case'),
    pytest.param('123=val', {'123': 'val'}, '', id='digit key'),
    pytest.param('k= spaced out ', {'k': 'spaced out'}, '', id='trimmed value'),
    pytest.param('k="a&b=c"', {'k': 'a&b=c'}, '', id='quoted value'),
    pytest.param("k=' padded '", {'k': 'padded'}, '', id='quoted value trimmed'),
    pytest.param('k={"a": [1]}', {'k': '{"a":[1]}'}, '', id='json value'),
    pytest.param('k=x"y', {'k': 'x"y'}, '', id='quote inside value'),
    pytest.param('k=a^&b', {'k': 'a&b'}, '', id='escaped separator'),
    pytest.param('k=a|b', {'k': 'a|b'}, '', id='single pipe is content'),
    pytest.param('k=a=b', {'k': 'a=b'}, '', id='equals inside value'),
    pytest.param('k=a||next', {'k': 'a'}, 'next', id='chain terminator'),
    pytest.param('k=[[x]]', {'k': '\ue000x\ue001'}, '', id='expression value'),
    pytest.param('', {}, '', id='empty'),
))
def test_parse_adv_args(text: str, expected: dict[str, str], rest: str) -> None:
    """Scan advanced arguments after a `?`."""
    parser = ScriptParser(text)

    assert parser.parse_adv_args() == expected
    assert parser.source[parser.pos:] == rest


@pytest.mark.parametrize('text, expected', (
    pytest.param('my-key=val', 'my-'),
    pytest.param('a=1&b c=2', 'a=1&b '),
    pytest.param('@b', '@'),
))
def test_parse_adv_args_fallback(text: str, expected: str) -> None:
    """Return the consumed text when a key is invalid."""
    assert ScriptParser(text).parse_adv_args() == Fallback(expected)


@pytest.mark.parametrize('text, expected, adv_args', (
    pytest.param('a,b,c', ['a', 'b', 'c'], {}, id='several'),
    pytest.param(' a , b ', ['a', 'b'], {}, id='trimmed'),
    pytest.param('', [''], {}, id='empty'),
    pytest.param('a,', ['a', ''], {}, id='trailing separator'),
    pytest.param('"a,b",c', ['a,b', 'c'], {}, id='quoted with separator'),
    pytest.param("'x'", ['x'], {}, id='single quoted'),
    pytest.param('a"b', ['a"b'], {}, id='quote mid value'),
    pytest.param('a{b', ['a{b'], {}, id='brace mid value'),
    pytest.param('{"x": 1},y', ['{"x":1}', 'y'], {}, id='json argument'),
    pytest.param('a^,b', ['a,b'], {}, id='escaped separator'),
    pytest.param('test^', ['test^'], {}, id='trailing introducer'),
    pytest.param('a|b', ['a|b'], {}, id='single pipe'),
    pytest.param('a||b', ['a'], {}, id='chain terminator'),
    pytest.param('a|', ['a'], {}, id='pipe at end'),
    pytest.param('a?k=v', ['a'], {'k': 'v'}, id='advanced arguments'),
    pytest.param('arg?my-key=val', ['arg?my-key=val'], {}, id='advanced fallback'),
    pytest.param('a[[x]]b', ['a\ue000x\ue001b'], {}, id='expression'),
))
def test_parse_args(text: str, expected: list[str], adv_args: dict[str, str]) -> None:
    """Scan comma-separated positional arguments."""
    assert ScriptParser(text).parse_args() == (expected, adv_args)


def test_parse_args_only_one_arg() -> None:
    """Keep commas as content."""
    assert ScriptParser('a,b').parse_args(only_one_arg=True) == (['a,b'], {})


def test_parse_args_literal() -> None:
    """Treat quotes and braces at the start as content."""
    parser = ScriptParser('"quoted" {json}?k=v')

    assert parser.parse_args(only_one_arg=True, literal=True) == (['"quoted" {json}'], {'k': 'v'})


def test_parse_args_prefix() -> None:
    """Prepend already consumed text to the first argument."""
    assert ScriptParser('rest').parse_args('*', only_one_arg=True, literal=True) == (['*rest'], {})


@pytest.mark.parametrize('text, error', (
    pytest.param('"open', UnmatchedQuoteError, id='quote'),
    pytest.param('{"open": 1', InvalidJSONError, id='json'),
    pytest.param('a?k="open', UnmatchedQuoteError, id='quoted advanced value'),
    pytest.param('a?k={', InvalidJSONError, id='json advanced value'),
))
def test_parse_args_errors(text: str, error: type[Exception]) -> None:
    """Propagate unmatched literal errors."""
    with pytest.raises(error):
        ScriptParser(text).parse_args()


@pytest.mark.parametrize('text, expected, adv_args', (
    pytest.param('abc', ['a', 'b', 'c'], {}, id='one per rune'),
    pytest.param('a{enter}b', ['a', '{enter}', 'b'], {}, id='extension'),
    pytest.param('\\{x', ['{', 'x'], {}, id='escaped brace'),
    pytest.param('x\\', ['x', '\\'], {}, id='escape at end'),
    pytest.param('a,b', ['a', ',', 'b'], {}, id='separator is content'),
    pytest.param('x?@b', ['x', '?', '@', 'b'], {}, id='advanced fallback'),
    pytest.param('ab?delay=10', ['a', 'b'], {'delay': '10'}, id='advanced arguments'),
    pytest.param('ab||next', ['a', 'b'], {}, id='chain terminator'),
))
def test_parse_input_macro_arg(text: str, expected: list[str], adv_args: dict[str, str]) -> None:
    """Split input macro arguments per rune."""
    assert ScriptParser(text).parse_input_macro_arg() == (expected, adv_args)


@pytest.mark.parametrize('text', (
    pytest.param('{enter', id='end of input'),
    pytest.param('{enter||**next', id='chain terminator'),
))
def test_unmatched_input_macro_ext(text: str) -> None:
    """Fail when an extension token is never closed."""
    with pytest.raises(UnmatchedInputMacroExtError, match=r'^unmatched input macro extension'):
        ScriptParser(text).parse_input_macro_arg()


@pytest.mark.parametrize('text, name, args, adv_args', (
    pytest.param('echo', 'echo', (), None, id='no arguments'),
    pytest.param('ECHO:x', 'echo', ('x',), None, id='lowercased name'),
    pytest.param('cmd:', 'cmd', ('',), None, id='empty argument'),
    pytest.param('launch.random:snes', 'launch.random', ('snes',), None, id='dotted name'),
    pytest.param('cmd?flag', 'cmd', (), {'flag': ''}, id='advanced only'),
    pytest.param('cmd?my-key=val', 'cmd', ('?my-key=val',), None, id='advanced fallback'),
    pytest.param('cmd:a?k=v', 'cmd', ('a',), {'k': 'v'}, id='both'),
    pytest.param('input.keyboard:ab', 'input.keyboard', ('a', 'b'), None, id='input macro'),
    pytest.param('INPUT.GAMEPAD:ab', 'input.gamepad', ('a', 'b'), None, id='input macro any case'),
    pytest.param('echo||**next', 'echo', (), None, id='chain terminator'),
))
def test_parse_command(text: str, name: str, args: tuple[str, ...],
                       adv_args: dict[str, str] | None) -> None:
    """Scan a command after `**`."""
    command = ScriptParser(text).parse_command()

    assert command.name == name
    assert command.args == args
    assert command.adv_args.raw() == adv_args


def test_parse_command_fallback() -> None:
    """Return the consumed text on an invalid name rune."""
    parser = ScriptParser('he@llo')

    assert parser.parse_command() == Fallback('he@')
    assert parser.source[parser.pos:] == 'llo'


@pytest.mark.parametrize('text', (
    pytest.param('', id='nothing'),
    pytest.param(':x', id='arguments without name'),
    pytest.param('?k=v', id='advanced arguments without name'),
    pytest.param('||**next', id='chain terminator'),
))
def test_empty_command_name(text: str) -> None:
    """Fail when no name is given."""
    with pytest.raises(EmptyCommandNameError, match=r'^command name is empty'):
        ScriptParser(text).parse_command()
