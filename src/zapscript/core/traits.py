"""Traits shorthand scanner.

`#key=value #flag` attaches typed metadata to the whole script. Values
are type-inferred unless quoted; `[a, b]` values are arrays. A segment
with a malformed key is handed back whole so the dispatcher can drop it.
"""

from typing import NamedTuple

from zapscript.errors import UnmatchedArrayBracketError
from zapscript.names import (
    EOF,
    QUOTES,
    SYM_ADV_ARG_EQ,
    SYM_ARRAY_END,
    SYM_ARRAY_SEP,
    SYM_ARRAY_START,
    SYM_CMD_SEP,
    SYM_ESCAPE,
    SYM_EXPR_START,
    SYM_TRAITS_START,
    is_adv_arg_name,
    is_trait_key_start,
    is_whitespace,
)
from zapscript.values import TraitValue, Traits, infer_type

from .titles import MediaTitleMixin


class TraitFallback(NamedTuple):
    """Signal that a traits segment holds an invalid key."""

    #: Raw text of the whole segment.
    text: str
    #: Lowercased key read before the failure, if any.
    key: str


def _ends_trait(ch: str) -> bool:
    """Check whether a rune ends a boolean key or an unquoted value."""
    return ch in (EOF, SYM_CMD_SEP, SYM_TRAITS_START) or is_whitespace(ch)


def _ends_array_element(ch: str) -> bool:
    """Check whether a rune ends an unquoted array element."""
    return ch in (EOF, SYM_ARRAY_SEP, SYM_ARRAY_END) or is_whitespace(ch)


class TraitsMixin(MediaTitleMixin):
    """Mixin scanning `#key=value` segments."""

    def parse_traits(self) -> Traits | TraitFallback:
        """Read traits after an already consumed `#`.

        Returns:
            Traits of the segment in input order, or a fallback when a
            key is malformed. The fallback consumes the rest of the
            segment.
        """
        start = self.pos - 1
        traits: Traits = {}

        while True:
            ch = self.read()
            if ch == EOF and traits:
                return traits

            if not is_trait_key_start(ch):
                if not self.check_end_of_cmd(ch):
                    self.consume_to_end_of_cmd()
                return TraitFallback(self.consumed_since(start), '')

            key = [ch]
            while is_adv_arg_name(self.peek()):
                key.append(self.read())
            name = ''.join(key).lower()

            following = self.peek()
            if following == SYM_ADV_ARG_EQ:
                self.skip()
                traits[name] = self.parse_trait_value()
            elif _ends_trait(following):
                traits[name] = True
            else:
                self.consume_to_end_of_cmd()
                return TraitFallback(self.consumed_since(start), name)

            if not self._next_trait():
                return traits

    def _next_trait(self) -> bool:
        """Advance past separators to the next trait.

        Traits are separated by whitespace, by another `#` or both. A
        single `|` between traits is skipped, while a chain terminator
        ends the segment.

        Returns:
            True if another trait follows, either after a consumed `#`
            or as a key start after whitespace.
        """
        spaced = False
        while True:
            following = self.peek()
            if following == SYM_TRAITS_START:
                self.skip()
                return True

            if following == SYM_CMD_SEP:
                if self.check_end_of_cmd(self.read()):
                    return False
            elif is_whitespace(following):
                self.skip()
                spaced = True
            else:
                return spaced and is_trait_key_start(following)

    def parse_trait_value(self) -> TraitValue:
        """Read a trait value after an already consumed `=`.

        Quoted values are strings, `[` opens an array unless it starts an
        `[[expression]]`, and anything else is read up to whitespace, `#`
        or `|` and type-inferred.

        Returns:
            The typed value.
        """
        buf: list[str] = []

        first = self.peek()
        if first in QUOTES:
            self.skip()
            return self.parse_quoted_arg(first)

        if first == SYM_ARRAY_START:
            self.skip()
            if self.peek() != SYM_EXPR_START:
                return self.parse_trait_array()
            buf.append(self.parse_expression())

        while not _ends_trait(self.peek()):
            ch = self.read()
            if ch == SYM_ESCAPE:
                buf.append(self.read_escaped())
            elif ch == SYM_EXPR_START:
                buf.append(self.parse_expression())
            else:
                buf.append(ch)

        return infer_type(''.join(buf))

    def parse_trait_array(self) -> list[TraitValue]:
        """Read an array after an already consumed `[`.

        Elements are comma-separated and may be surrounded by any
        whitespace. A trailing comma is allowed.

        Returns:
            Typed elements.

        Raises:
            UnmatchedArrayBracketError: If the array is not closed or an
                element is followed by anything but `,` or `]`.
        """
        elements: list[TraitValue] = []

        while True:
            self.skip_whitespace()
            if self.peek() == SYM_ARRAY_END:
                self.skip()
                return elements

            if self.peek() == EOF:
                raise UnmatchedArrayBracketError.from_reader(self)

            elements.append(self.parse_array_element())

            self.skip_whitespace()
            following = self.read()
            if following == SYM_ARRAY_END:
                return elements
            if following != SYM_ARRAY_SEP:
                raise UnmatchedArrayBracketError.from_reader(self)

    def parse_array_element(self) -> TraitValue:
        """Read one array element.

        Returns:
            A string for quoted elements, else the inferred value.
        """
        first = self.peek()
        if first in QUOTES:
            self.skip()
            return self.parse_quoted_arg(first)

        buf = []
        while not _ends_array_element(self.peek()):
            ch = self.read()
            buf.append(self.read_escaped() if ch == SYM_ESCAPE else ch)

        return infer_type(''.join(buf).strip())
