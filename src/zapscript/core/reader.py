"""Character cursor over script text.

The reader exposes a single-pass cursor with one rune of lookahead and
exactly one rune of pushback. Every scanner mixin builds on it.
"""

from typing import NamedTuple

from zapscript.errors import InvalidEncodingError, ParseError
from zapscript.names import EOF, SYM_CMD_SEP, is_whitespace


class Fallback(NamedTuple):
    """Signal that a sub-grammar did not match.

    Carries the exact text consumed by the failed attempt so the caller
    can reinterpret it as literal content.
    """

    text: str


class ScriptReader:
    """Single-use cursor over an immutable script.

    Attributes:
        source: Decoded script text.
        pos: Number of runes consumed so far.
    """

    def __init__(self, value: str | bytes) -> None:
        """Initialize a reader.

        Args:
            value: Script text, or UTF-8 encoded script bytes.

        Raises:
            InvalidEncodingError: If bytes are not valid UTF-8.
        """
        if isinstance(value, bytes | bytearray):
            try:
                value = bytes(value).decode('utf-8')
            except UnicodeDecodeError as base:
                raise InvalidEncodingError.at(
                    base.start,
                    message=f'invalid UTF-8 input at byte {base.start}',
                    error=base,
                ) from base

        self.source: str = value
        self.pos: int = 0

        self._can_unread = False

    def read(self) -> str:
        """Consume and return the next rune.

        Returns:
            The next rune, or `EOF` once the input is exhausted.

        Raises:
            InvalidEncodingError: If the rune is a lone surrogate.
        """
        if self.pos >= len(self.source):
            self._can_unread = False
            return EOF

        ch = self.source[self.pos]
        if '\ud800' <= ch <= '\udfff':
            raise InvalidEncodingError.from_reader(self)

        self.pos += 1
        self._can_unread = True

        return ch

    def peek(self) -> str:
        """Return the next rune without consuming it."""
        if self.pos >= len(self.source):
            return EOF

        ch = self.source[self.pos]
        if '\ud800' <= ch <= '\udfff':
            raise InvalidEncodingError.from_reader(self)

        return ch

    def unread(self) -> None:
        """Push back the rune returned by the last `read`.

        Raises:
            ParseError: If the last read returned `EOF` or a rune was
                already pushed back.
        """
        if not self._can_unread:
            raise ParseError.from_reader(self, message='nothing to unread')

        self.pos -= 1
        self._can_unread = False

    def skip(self) -> None:
        """Consume the next rune, discarding it."""
        self.read()

    def check_end_of_cmd(self, ch: str) -> bool:
        """Check whether a just-read rune terminates the command.

        A separator ends the command when it is doubled (the second one
        is consumed) or when it is the last rune of the input.

        Args:
            ch: Rune returned by the last `read`.

        Returns:
            True if the command chain segment ends here.
        """
        if ch != SYM_CMD_SEP:
            return False

        following = self.peek()
        if following == SYM_CMD_SEP:
            self.skip()

        return following in (EOF, SYM_CMD_SEP)

    def consume_to_end_of_cmd(self) -> str:
        """Consume the rest of the current chain segment.

        Returns:
            Text read up to (excluding) the chain terminator.
        """
        buf = []
        while (ch := self.read()) != EOF:
            if self.check_end_of_cmd(ch):
                break
            buf.append(ch)

        return ''.join(buf)

    def consumed_since(self, start: int) -> str:
        """Return the raw source consumed from `start` to the cursor."""
        return self.source[start:self.pos]

    def skip_whitespace(self) -> None:
        """Consume whitespace up to the next significant rune."""
        while is_whitespace(self.peek()):
            self.skip()
