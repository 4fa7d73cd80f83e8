"""Escape sequence decoding.

Escapes use the `^` introducer and are legal wherever literal text is
scanned: arguments, advanced argument values, quoted literals, media
titles and trait values.
"""

from zapscript.names import EOF, SYM_DOUBLE_QUOTE, SYM_ESCAPE, SYM_SINGLE_QUOTE

from .reader import ScriptReader

#: Escaped runes with a special meaning. Any other rune stands for itself.
ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    SYM_ESCAPE: SYM_ESCAPE,
    SYM_DOUBLE_QUOTE: SYM_DOUBLE_QUOTE,
    SYM_SINGLE_QUOTE: SYM_SINGLE_QUOTE,
}


class EscapesMixin(ScriptReader):
    """Mixin decoding `^` escape sequences."""

    def parse_escape_seq(self) -> str | None:
        """Decode the rune following an already consumed introducer.

        Unknown escapes decode to the escaped rune alone.

        Returns:
            The decoded text, or None at end of input.
        """
        ch = self.read()
        if ch == EOF:
            return None

        return ESCAPES.get(ch, ch)

    def read_escaped(self) -> str:
        """Decode an escape, keeping a bare introducer at end of input."""
        decoded = self.parse_escape_seq()
        if decoded is None:
            return SYM_ESCAPE

        return decoded
