"""Positional, advanced and input macro argument scanners."""

from zapscript.errors import EmptyCommandNameError, UnmatchedInputMacroExtError
from zapscript.models import AdvArgs, Command
from zapscript.names import (
    EOF,
    QUOTES,
    SYM_ADV_ARG_EQ,
    SYM_ADV_ARG_SEP,
    SYM_ADV_ARG_START,
    SYM_ARG_SEP,
    SYM_ARG_START,
    SYM_ESCAPE,
    SYM_EXPR_START,
    SYM_JSON_START,
    SYM_MACRO_ESCAPE,
    SYM_MACRO_EXT_END,
    SYM_MACRO_EXT_START,
    is_adv_arg_name,
    is_cmd_name,
    is_input_macro_cmd,
)

from .literals import LiteralsMixin
from .reader import Fallback

#: Positional arguments and advanced arguments of one command.
type ParsedArgs = tuple[list[str], dict[str, str]]


class ArgumentsMixin(LiteralsMixin):
    """Mixin scanning command names and their arguments."""

    def parse_adv_args(self) -> dict[str, str] | Fallback:
        """Read advanced arguments after an already consumed `?`.

        Keys without `=` get an empty value. Values may open with a
        quoted or JSON literal and run until `&`, a chain terminator or
        the end of input; they are trimmed.

        Returns:
            Parsed arguments, or a fallback with the consumed text when
            a key holds an invalid rune.
        """
        start = self.pos
        adv_args: dict[str, str] = {}

        key: list[str] = []
        value: list[str] = []
        in_value = False
        value_start = -1

        while (ch := self.read()) != EOF:
            if in_value:
                at_value_start = value_start == self.pos - 1
                if at_value_start and ch in QUOTES:
                    value = [self.parse_quoted_arg(ch)]
                    continue
                if at_value_start and ch == SYM_JSON_START:
                    value = [self.parse_json_arg()]
                    continue
                if ch == SYM_ESCAPE:
                    value.append(self.read_escaped())
                    continue

            if self.check_end_of_cmd(ch):
                break

            if ch == SYM_ADV_ARG_SEP:
                self._store_adv_arg(adv_args, key, value)
                key, value, in_value = [], [], False
            elif ch == SYM_ADV_ARG_EQ and not in_value:
                value_start = self.pos
                in_value = True
            elif in_value:
                value.append(self.parse_expression() if ch == SYM_EXPR_START else ch)
            elif is_adv_arg_name(ch):
                key.append(ch)
            else:
                return Fallback(self.consumed_since(start))

        self._store_adv_arg(adv_args, key, value)

        return adv_args

    @staticmethod
    def _store_adv_arg(adv_args: dict[str, str],
                       key: list[str], value: list[str]) -> None:
        """Store a scanned argument unless its key is empty."""
        if key:
            adv_args[''.join(key)] = ''.join(value).strip()

    def parse_args(self, prefix: str = '', *,
                   only_adv_args: bool = False,
                   only_one_arg: bool = False,
                   literal: bool = False) -> ParsedArgs:
        """Read comma-separated positional arguments.

        Args:
            prefix: Text already consumed that belongs to the first
                argument.
            only_adv_args: The command was written as `name?...`, so an
                empty argument list is not recorded.
            only_one_arg: Commas are plain text.
            literal: Quotes and braces opening a value are plain text.

        Returns:
            Positional arguments (trimmed) and advanced arguments.
        """
        args: list[str] = []
        adv_args: dict[str, str] = {}

        current = [prefix]
        arg_start = self.pos

        while (ch := self.read()) != EOF:
            at_arg_start = not literal and arg_start == self.pos - 1
            if at_arg_start and ch in QUOTES:
                current = [self.parse_quoted_arg(ch)]
                continue
            if at_arg_start and ch == SYM_JSON_START:
                current = [self.parse_json_arg()]
                continue
            if ch == SYM_ESCAPE:
                current.append(self.read_escaped())
                continue

            if self.check_end_of_cmd(ch):
                break

            if ch == SYM_ARG_SEP and not only_one_arg:
                args.append(''.join(current).strip())
                current = []
                arg_start = self.pos
            elif ch == SYM_ADV_ARG_START:
                parsed = self.parse_adv_args()
                if isinstance(parsed, Fallback):
                    current.append(SYM_ADV_ARG_START + parsed.text)
                    continue

                # Advanced arguments always end the command.
                adv_args = parsed
                break
            elif ch == SYM_EXPR_START:
                current.append(self.parse_expression())
            else:
                current.append(ch)

        text = ''.join(current).strip()
        if text or not only_adv_args:
            args.append(text)

        return args, adv_args

    def parse_input_macro_arg(self) -> ParsedArgs:
        """Read input macro arguments, one per rune.

        `\\x` yields `x` as its own argument and `{name}` yields the
        whole braced token.

        Returns:
            Macro arguments and advanced arguments.
        """
        args: list[str] = []
        adv_args: dict[str, str] = {}

        while (ch := self.read()) != EOF:
            if ch == SYM_MACRO_ESCAPE:
                escaped = self.read()
                args.append(escaped or SYM_MACRO_ESCAPE)
                continue

            if self.check_end_of_cmd(ch):
                break

            if ch == SYM_MACRO_EXT_START:
                args.append(self._parse_macro_ext())
            elif ch == SYM_ADV_ARG_START:
                parsed = self.parse_adv_args()
                if isinstance(parsed, Fallback):
                    args.extend(SYM_ADV_ARG_START + parsed.text)
                    continue

                adv_args = parsed
                break
            else:
                args.append(ch)

        return args, adv_args

    def _parse_macro_ext(self) -> str:
        """Read an extended macro token after its opening brace.

        Raises:
            UnmatchedInputMacroExtError: If the command ends before the
                closing brace.
        """
        buf = [SYM_MACRO_EXT_START]
        while (ch := self.read()) != SYM_MACRO_EXT_END:
            if ch == EOF or self.check_end_of_cmd(ch):
                raise UnmatchedInputMacroExtError.from_reader(self)
            buf.append(ch)

        buf.append(SYM_MACRO_EXT_END)

        return ''.join(buf)

    def parse_command(self) -> Command | Fallback:
        """Read a command after an already consumed `**`.

        Returns:
            The command, or a fallback with the consumed text when the
            name holds an invalid rune.

        Raises:
            EmptyCommandNameError: If no name precedes the arguments or
                the end of the command.
        """
        start = self.pos

        name: list[str] = []
        args: list[str] = []
        adv_args: dict[str, str] = {}

        while (ch := self.read()) != EOF:
            if self.check_end_of_cmd(ch):
                break

            if is_cmd_name(ch):
                name.append(ch)
                continue

            if ch not in (SYM_ARG_START, SYM_ADV_ARG_START):
                return Fallback(self.consumed_since(start))

            if not name:
                break

            only_adv_args = ch == SYM_ADV_ARG_START
            if only_adv_args:
                self.unread()

            if is_input_macro_cmd(''.join(name)):
                args, adv_args = self.parse_input_macro_arg()
            else:
                args, adv_args = self.parse_args(only_adv_args=only_adv_args)

            break

        if not name:
            raise EmptyCommandNameError.from_reader(self)

        return Command(
            name=''.join(name).lower(),
            args=tuple(args),
            adv_args=AdvArgs(adv_args or None),
        )
