"""ZapScript symbols, reserved names and character classes.

This module defines the lexical alphabet of the language: the single
characters that switch scanner modes, the private-use markers wrapping
tokenized expressions, the reserved command names and the well-known
advanced argument keys.

The rules defined here form part of the public language contract and are
relied upon by the scanners, the typed argument schemas and the CLI.
"""

from enum import StrEnum
from typing import Annotated

from pydantic import Field

#: End of input sentinel returned by the reader.
EOF = ''

SYM_CMD_START = '*'
SYM_CMD_SEP = '|'
SYM_ESCAPE = '^'

SYM_ARG_START = ':'
SYM_ARG_SEP = ','
SYM_DOUBLE_QUOTE = '"'
SYM_SINGLE_QUOTE = "'"

SYM_ADV_ARG_START = '?'
SYM_ADV_ARG_SEP = '&'
SYM_ADV_ARG_EQ = '='

SYM_JSON_START = '{'
SYM_JSON_END = '}'
SYM_JSON_ESCAPE = '\\'
SYM_JSON_STRING = '"'

SYM_MACRO_ESCAPE = '\\'
SYM_MACRO_EXT_START = '{'
SYM_MACRO_EXT_END = '}'

SYM_EXPR_START = '['
SYM_EXPR_END = ']'

SYM_MEDIA_TITLE_START = '@'
SYM_MEDIA_TITLE_SEP = '/'

SYM_TRAITS_START = '#'
SYM_ARRAY_START = '['
SYM_ARRAY_END = ']'
SYM_ARRAY_SEP = ','

SYM_TAG_AND = '+'
SYM_TAG_NOT = '-'
SYM_TAG_OR = '~'

#: Private-use code points wrapping a tokenized expression.
#: Authored text never contains them, so the evaluator can split on them.
TOK_EXPR_START = '\uE000'
TOK_EXPR_END = '\uE001'

#: Characters opening a quoted literal at the start of a value.
QUOTES = frozenset((SYM_DOUBLE_QUOTE, SYM_SINGLE_QUOTE))

#: Whitespace recognized by the scanners (ASCII only).
WHITESPACE = frozenset(' \t\n\r')

_LETTERS = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ')
_DIGITS = frozenset('0123456789')

#: Characters allowed in a command name.
CMD_NAME_CHARS = _LETTERS | _DIGITS | {'.'}

#: Characters allowed in advanced argument and trait keys.
ADV_ARG_NAME_CHARS = _LETTERS | _DIGITS | {'_'}

#: Characters allowed as the first character of a trait key.
TRAIT_KEY_START_CHARS = _LETTERS

CMD_LAUNCH = 'launch'
CMD_LAUNCH_TITLE = 'launch.title'
CMD_LAUNCH_RANDOM = 'launch.random'
CMD_LAUNCH_SEARCH = 'launch.search'
CMD_TRAITS = 'traits'
CMD_INPUT_KEYBOARD = 'input.keyboard'
CMD_INPUT_GAMEPAD = 'input.gamepad'
CMD_PLAYLIST_PLAY = 'playlist.play'
CMD_MISTER_SCRIPT = 'mister.script'

#: Commands whose arguments are split per character.
INPUT_MACRO_COMMANDS = frozenset((CMD_INPUT_KEYBOARD, CMD_INPUT_GAMEPAD))

ACTION_RUN = 'run'
ACTION_DETAILS = 'details'
MODE_SHUFFLE = 'shuffle'


class Key(StrEnum):
    """Well-known advanced argument keys."""

    WHEN = 'when'
    LAUNCHER = 'launcher'
    SYSTEM = 'system'
    ACTION = 'action'
    TAGS = 'tags'
    MODE = 'mode'
    NAME = 'name'
    PRE_NOTICE = 'pre_notice'
    HIDDEN = 'hidden'


def is_cmd_name(ch: str) -> bool:
    """Check whether a character may appear in a command name."""
    return ch in CMD_NAME_CHARS


def is_adv_arg_name(ch: str) -> bool:
    """Check whether a character may appear in an advanced argument key."""
    return ch in ADV_ARG_NAME_CHARS


def is_trait_key_start(ch: str) -> bool:
    """Check whether a character may open a trait key."""
    return ch in TRAIT_KEY_START_CHARS


def is_whitespace(ch: str) -> bool:
    """Check whether a character is scanner whitespace."""
    return ch in WHITESPACE


def is_input_macro_cmd(name: str) -> bool:
    """Check whether a command splits its arguments per character.

    Args:
        name: Command name in any case.

    Returns:
        True for keyboard and gamepad input commands.
    """
    return name.lower() in INPUT_MACRO_COMMANDS


CommandName = Annotated[
    str, Field(
        min_length=1,
        pattern=r'^[a-z0-9.]+$',
        title='Command name',
        description=(
            'Lowercase name of a parsed command. '
            'Names are limited to ASCII letters, digits, and periods '
            'and are normalized to lowercase by the parser.'
        ),
        examples=[
            'launch',
            'launch.title',
            'input.keyboard',
        ],
    ),
]

AdvArgName = Annotated[
    str, Field(
        min_length=1,
        pattern=r'^[a-zA-Z0-9_]+$',
        title='Advanced argument key',
        description=(
            'Key of an advanced argument attached to a command. '
            'Keys are limited to ASCII letters, digits, and underscores '
            'and keep the case used in the script.'
        ),
        examples=[
            'when',
            'launcher',
            'pre_notice',
        ],
    ),
]
