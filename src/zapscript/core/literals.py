"""Quoted and JSON literal scanners.

Both scanners are triggered only when their opening rune is the very
first rune of a value; anywhere else quotes and braces are plain text.
"""

from json import dumps, loads

from zapscript.errors import InvalidJSONError, UnmatchedQuoteError
from zapscript.names import (
    EOF,
    SYM_ARRAY_END,
    SYM_ARRAY_START,
    SYM_ESCAPE,
    SYM_EXPR_START,
    SYM_JSON_END,
    SYM_JSON_ESCAPE,
    SYM_JSON_START,
    SYM_JSON_STRING,
)

from .expressions import ExpressionsMixin

#: Brace depth change per rune outside JSON strings.
BRACE_DEPTH = {
    SYM_JSON_START: 1,
    SYM_JSON_END: -1,
}

#: Container nesting change per rune outside JSON strings.
NESTING_DEPTH = {
    **BRACE_DEPTH,
    SYM_ARRAY_START: 1,
    SYM_ARRAY_END: -1,
}

#: Deepest accepted nesting of JSON objects and arrays.
MAX_JSON_DEPTH = 128


def _reject_constant(name: str) -> None:
    """Refuse `NaN` and `Infinity`, which are not valid JSON."""
    raise ValueError(f'Invalid JSON constant {name}')


class LiteralsMixin(ExpressionsMixin):
    """Mixin scanning quoted strings and embedded JSON values."""

    def parse_quoted_arg(self, quote: str) -> str:
        """Read a quoted literal after its opening quote.

        Escapes are decoded and expressions tokenized inline.

        Args:
            quote: Opening quote rune, which also closes the literal.

        Returns:
            The literal content without quotes.

        Raises:
            UnmatchedQuoteError: If input ends before the closing quote.
        """
        buf = []
        while (ch := self.read()) != quote:
            if ch == EOF:
                raise UnmatchedQuoteError.from_reader(self)

            if ch == SYM_ESCAPE:
                buf.append(self.read_escaped())
            elif ch == SYM_EXPR_START:
                buf.append(self.parse_expression())
            else:
                buf.append(ch)

        return ''.join(buf)

    def parse_json_arg(self) -> str:
        """Read a JSON value after its opening brace.

        Braces are counted outside JSON strings until the value is
        balanced, then the captured text is decoded and re-encoded in
        a minified canonical form.

        Returns:
            Canonical JSON text.

        Raises:
            InvalidJSONError: If input ends before the value is balanced,
                the value nests deeper than `MAX_JSON_DEPTH` or the
                captured text is not valid JSON.
        """
        buf = [SYM_JSON_START]
        depth = 1
        nesting = 1
        in_string = False
        escaped = False

        while depth > 0:
            ch = self.read()
            if ch == EOF:
                raise InvalidJSONError.from_reader(self)

            buf.append(ch)

            if escaped:
                escaped = False
            elif ch == SYM_JSON_ESCAPE:
                escaped = True
            elif ch == SYM_JSON_STRING:
                in_string = not in_string
            elif not in_string:
                depth += BRACE_DEPTH.get(ch, 0)
                nesting += NESTING_DEPTH.get(ch, 0)
                if nesting > MAX_JSON_DEPTH:
                    raise InvalidJSONError.from_reader(
                        self, message=f'invalid JSON argument: nested deeper than {MAX_JSON_DEPTH} levels',
                    )

        try:
            value = loads(''.join(buf), parse_constant=_reject_constant)
        except (ValueError, RecursionError) as error:
            raise InvalidJSONError.from_reader(self, error=error) from error

        return dumps(value, ensure_ascii=False, separators=(',', ':'))
