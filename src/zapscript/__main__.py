"""Command-line utilities for ZapScript.

Scripts can be parsed to JSON, rendered against a YAML expression
environment and inspected for tag filters. Parser options default to
`ZAPSCRIPT_*` environment variables.
"""

from json import dumps
from pathlib import Path

from click import ClickException, argument, echo, get_text_stream, group, option
from click import Path as PathParam
from yaml import YAMLError, safe_load

from zapscript.core import ScriptParser
from zapscript.errors import ZapScriptError
from zapscript.models import ParserSettings, Script
from zapscript.tags import parse_tag_filters

STDIN_ARGUMENT = '-'

InputFilepath = PathParam(
    exists=True,
    dir_okay=False,
    readable=True,
    path_type=Path,
)


class ScriptError(ClickException):
    """Report a script error on stderr with exit status 1."""


def _read_text(text: str, settings: ParserSettings) -> str:
    """Resolve the script argument and enforce the length limit.

    Args:
        text: Script text, or `-` to read standard input.
        settings: Resolved parser settings.

    Returns:
        Script text.
    """
    if text == STDIN_ARGUMENT:
        text = get_text_stream('stdin').read().rstrip('\r\n')

    if settings.max_length is not None and len(text) > settings.max_length:
        raise ScriptError(
            f'script is longer than {settings.max_length} characters',
        )

    return text


@group(help='Command-line utilities for ZapScript.')
def cli() -> None:
    """Root CLI group for ZapScript tools."""
    return None


@cli.command(
    name='parse',
    help='Parse a script and print it as JSON. Use - to read standard input.',
)
@option(
    '--strict/--no-strict',
    default=None,
    help='Raise on malformed trait keys instead of dropping them.',
)
@argument('text')
def parse_command(text: str, strict: bool | None) -> None:
    """Parse a script and print its JSON form."""
    settings = ParserSettings()
    if strict is None:
        strict = settings.strict

    try:
        script = ScriptParser(_read_text(text, settings), strict=strict).parse_script()
    except ZapScriptError as error:
        raise ScriptError(str(error)) from error

    echo(script.model_dump_json(indent=2))


@cli.command(
    name='render',
    help=(
        'Tokenize and evaluate the expressions in a text. '
        'Names come from an optional YAML environment file.'
    ),
)
@option(
    '-e', '--env',
    'env_file',
    type=InputFilepath,
    help='YAML file with the expression environment.',
)
@argument('text')
def render_command(text: str, env_file: Path | None) -> None:
    """Evaluate the expressions of a text."""
    environment = {}
    if env_file is not None:
        try:
            environment = safe_load(env_file.read_text()) or {}
        except YAMLError as error:
            raise ScriptError(f'Invalid YAML in {env_file}: {error}') from error

    if not isinstance(environment, dict):
        raise ScriptError(f'Environment in {env_file} must be a mapping')

    try:
        tokenized = ScriptParser(_read_text(text, ParserSettings())).parse_expressions()
        rendered = ScriptParser(tokenized).eval_expressions(environment)
    except ZapScriptError as error:
        raise ScriptError(str(error)) from error

    echo(rendered)


@cli.command(
    name='tags',
    help='Parse a tag filter list and print it as JSON.',
)
@argument('text')
def tags_command(text: str) -> None:
    """Print parsed tag filters."""
    try:
        filters = parse_tag_filters(text)
    except ZapScriptError as error:
        raise ScriptError(str(error)) from error

    echo(dumps(
        [item.model_dump(mode='json') for item in filters],
        ensure_ascii=False,
        indent=2,
    ))


@cli.command(
    name='schema',
    help='Print the JSON Schema of a parsed script.',
)
def schema_command() -> None:
    """Print the JSON Schema of `Script`."""
    echo(dumps(Script.model_json_schema(), ensure_ascii=False, indent=2))


if __name__ == '__main__':
    cli()
