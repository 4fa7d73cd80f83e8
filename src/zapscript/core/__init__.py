"""Single-pass ZapScript scanner.

The scanner is split into mixins, one per sub-grammar, stacked on top of
a character cursor with one rune of lookahead and pushback. The public
entry point is `ScriptParser`.
"""

from .expressions import Environment, Part, PartType
from .parser import ScriptParser
from .reader import Fallback, ScriptReader

__all__ = (
    'Environment',
    'Fallback',
    'Part',
    'PartType',
    'ScriptParser',
    'ScriptReader',
)
