"""Parser for ZapScript, a one-line command language.

A script chains commands with `||`. Each segment is an explicit command
(`**name:arg1,arg2?key=value`), a media title (`@system/title`), traits
(`#key=value`) or a target launched as written. Arguments may embed
`[[expression]]` placeholders that are tokenized while parsing and
evaluated later against an environment.

Key features:
- immutable pydantic result models with a stable JSON form;
- silent literal fallback for malformed sub-syntax;
- typed advanced argument schemas and tag filter parsing;
- pluggable expression engines, `simpleeval` by default.
"""

from typing import TYPE_CHECKING

from zapscript.core import ScriptParser
from zapscript.errors import ZapScriptError
from zapscript.models import AdvArgs, Command, Script

if TYPE_CHECKING:
    from zapscript.core import Environment
    from zapscript.engine import ExpressionEngine


def parse_script(text: str | bytes, *, strict: bool = False) -> Script:
    """Parse a script with a fresh parser."""
    return ScriptParser(text, strict=strict).parse_script()


def parse_expressions(text: str | bytes) -> str:
    """Tokenize expressions in template text with a fresh parser."""
    return ScriptParser(text).parse_expressions()


def eval_expressions(text: str | bytes, environment: 'Environment' = None, *,
                     engine: 'ExpressionEngine | None' = None) -> str:
    """Evaluate tokenized text with a fresh parser."""
    return ScriptParser(text).eval_expressions(environment, engine=engine)


__all__ = (
    'AdvArgs',
    'Command',
    'Script',
    'ScriptParser',
    'ZapScriptError',
    'eval_expressions',
    'parse_expressions',
    'parse_script',
)
