"""Top-level script dispatcher.

The dispatcher reads a script segment by segment. The first significant
rune of each segment selects the sub-grammar:

- `@` scans a media title;
- `#` scans traits;
- `**` scans an explicit command;
- anything else (including a single `*`) is launched literally.

Segments are separated by the `||` chain terminator. Commands are
collected in order and traits are merged into one mapping, later keys
overriding earlier ones.
"""

from json import loads
from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from zapscript.errors import (
    EmptyScriptError,
    InvalidJSONError,
    InvalidTraitKeyError,
    ParserStateError,
    UnexpectedEOFError,
    ZapScriptWarning,
)
from zapscript.models import AdvArgs, Command, Script
from zapscript.names import (
    CMD_LAUNCH,
    CMD_LAUNCH_TITLE,
    CMD_TRAITS,
    EOF,
    SYM_CMD_SEP,
    SYM_CMD_START,
    SYM_JSON_START,
    SYM_MEDIA_TITLE_START,
    SYM_TRAITS_START,
    is_whitespace,
)

from .reader import Fallback
from .traits import TraitFallback, TraitsMixin

if TYPE_CHECKING:
    from zapscript.engine import ExpressionEngine
    from zapscript.values import Traits

    from .expressions import Environment


class ScriptParser(TraitsMixin):
    """Single-use ZapScript parser.

    Each instance owns a cursor over one script and may run exactly one
    of `parse_script`, `parse_expressions` or `eval_expressions`.

    Attributes:
        strict_mode: If True, a malformed trait key raises an error.
            If False, the trait segment is silently dropped.
    """

    strict_mode: bool = False

    def __init__(self, value: str | bytes, *, strict: bool = False) -> None:
        """Initialize a parser.

        Args:
            value: Script text, or UTF-8 encoded script bytes.
            strict: Raise on malformed trait keys.
        """
        super().__init__(value)

        self.strict_mode = strict
        self._used = False

    def _claim(self) -> None:
        """Mark the parser as used, refusing a second run."""
        if self._used:
            raise ParserStateError.from_reader(self)

        self._used = True

    def parse_script(self) -> Script:
        """Parse the whole script.

        Returns:
            Commands in chain order and the merged traits.

        Raises:
            ParseError: On any hard syntax error.
        """
        self._claim()

        cmds: list[Command] = []
        traits: Traits = {}
        traits_seen = False
        invalid_trait: TraitFallback | None = None
        chained = False

        while (ch := self.read()) != EOF:
            if is_whitespace(ch):
                continue

            # Extra separators after a chain terminator.
            if ch == SYM_CMD_SEP and chained:
                continue

            chained = True

            if ch == SYM_JSON_START and self.pos == 1:
                raise InvalidJSONError.from_reader(
                    self, message='invalid JSON argument: top-level JSON scripts are reserved',
                )

            if ch == SYM_MEDIA_TITLE_START:
                cmds.append(self._parse_media_title_cmd())

            elif ch == SYM_TRAITS_START:
                parsed = self.parse_traits()
                if not isinstance(parsed, TraitFallback):
                    traits.update(parsed)
                    traits_seen = True
                elif self.strict_mode:
                    raise InvalidTraitKeyError.from_reader(
                        self, message=f'invalid trait key in {parsed.text!r}',
                    )
                elif invalid_trait is None:
                    invalid_trait = parsed

            elif ch == SYM_CMD_START:
                following = self.peek()
                if following == EOF:
                    raise UnexpectedEOFError.from_reader(self)

                if following != SYM_CMD_START:
                    cmds.append(self._parse_auto_launch_cmd(SYM_CMD_START))
                    continue

                self.skip()
                parsed = self.parse_command()
                if isinstance(parsed, Fallback):
                    cmds.append(self._parse_auto_launch_cmd(SYM_CMD_START * 2 + parsed.text))
                elif parsed.name == CMD_TRAITS:
                    traits.update(self._load_traits_cmd(parsed))
                    traits_seen = True
                else:
                    cmds.append(parsed)

            else:
                self.unread()
                cmds.append(self._parse_auto_launch_cmd())

        if not cmds and not traits_seen:
            if invalid_trait is not None:
                raise InvalidTraitKeyError.from_reader(
                    self, message=f'invalid trait key in {invalid_trait.text!r}',
                )
            raise EmptyScriptError.from_reader(self)

        try:
            return Script(
                cmds=tuple(cmds),
                traits=traits if traits_seen else None,
            )
        except ValidationError as error:
            # Only JSON traits can hold values the trait schema refuses.
            raise InvalidJSONError.from_reader(self, error=error) from error

    def _parse_auto_launch_cmd(self, prefix: str = '') -> Command:
        """Launch the rest of the segment literally.

        Args:
            prefix: Text already consumed that starts the target.
        """
        args, adv_args = self.parse_args(prefix, only_one_arg=True, literal=True)

        return Command(
            name=CMD_LAUNCH,
            args=tuple(args),
            adv_args=AdvArgs(adv_args or None),
        )

    def _parse_media_title_cmd(self) -> Command:
        """Build a title launch, or a literal launch for invalid titles."""
        title = self.parse_media_title()
        adv_args = AdvArgs(title.adv_args or None)

        if not title.valid:
            return Command(
                name=CMD_LAUNCH,
                args=(SYM_MEDIA_TITLE_START + title.content,),
                adv_args=adv_args,
            )

        return Command(
            name=CMD_LAUNCH_TITLE,
            args=(title.content,),
            adv_args=adv_args,
        )

    def _load_traits_cmd(self, cmd: Command) -> 'Traits':
        """Decode the JSON object argument of the traits command.

        Raises:
            InvalidJSONError: If the command does not hold exactly one
                JSON object argument.
        """
        if not cmd.adv_args.is_empty():
            warn(
                f'Advanced arguments of {CMD_TRAITS!r} are ignored',
                category=ZapScriptWarning,
                stacklevel=3,
            )

        if len(cmd.args) != 1:
            raise InvalidJSONError.from_reader(
                self, message=f'invalid JSON argument: {CMD_TRAITS!r} takes one JSON object',
            )

        try:
            value = loads(cmd.args[0])
        except (ValueError, RecursionError) as error:
            raise InvalidJSONError.from_reader(self, error=error) from error

        if not isinstance(value, dict):
            raise InvalidJSONError.from_reader(
                self, message=f'invalid JSON argument: {CMD_TRAITS!r} takes one JSON object',
            )

        return value

    def parse_expressions(self) -> str:
        """Decode escapes and tokenize expressions in the whole input."""
        self._claim()

        return super().parse_expressions()

    def eval_expressions(self, environment: 'Environment' = None, *,
                         engine: 'ExpressionEngine | None' = None) -> str:
        """Evaluate every tokenized expression in the input."""
        self._claim()

        return super().eval_expressions(environment, engine=engine)
