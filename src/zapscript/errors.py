"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report malformed scripts, expression evaluation failures and invalid
advanced arguments in a structured and extensible way.

Every hard error raised by the parser carries the rune offset at which
it was detected and, where available, the source text, so callers can
render a short snippet pointing at the failure.
"""

from os import linesep
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from typing import Self

if TYPE_CHECKING:
    from pydantic import ValidationError

if TYPE_CHECKING:
    from zapscript.core.reader import ScriptReader

SNIPPET_WIDTH = 40
SNIPPET_CARET = '^'

FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Script text being parsed.
    source: str | None

    #: Rune offset at which the failure was detected.
    position: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None


class ErrorFormatter:
    """Utility class for formatting script-related errors.

    Produces a message followed by the failure offset and a one-line
    window of the source with a caret under the failing rune.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        location = cls.get_location_string(context, indent=FORMAT_INDENT)
        if not location:
            return message

        message += linesep + location
        if snippet := cls.get_snippet_string(context, indent=FORMAT_INDENT * 2):
            message += linesep + snippet

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format the failure offset.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A location line, or an empty string without a position.
        """
        position = context.get('position')
        if position is None:
            return ''

        return f'{cls._ensure_indent(indent)}at position {position}'

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Render a window of the source around the failure.

        Line breaks inside the window are shown as spaces so the caret
        stays aligned.

        Args:
            context: Error context containing the source and position.
            indent: Optional indentation (string or number of spaces).

        Returns:
            Two lines (source window and caret), or an empty string
            if no source is available.
        """
        source = context.get('source')
        position = context.get('position')
        if not source or position is None:
            return ''

        indent = cls._ensure_indent(indent)

        # Offsets count consumed runes, so the failing rune sits just before.
        caret = max(min(position, len(source)) - 1, 0)
        start = max(caret - SNIPPET_WIDTH // 2, 0)
        window = source[start:start + SNIPPET_WIDTH]
        window = ''.join(' ' if ch in '\r\n\t' else ch for ch in window)

        return linesep.join((
            f'{indent}{window}',
            f'{indent}{" " * (caret - start)}{SNIPPET_CARET}',
        ))

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ZapScriptWarning(UserWarning):
    """Warning emitted for non-fatal script issues.

    Used when part of a script is accepted but ignored, for example
    advanced arguments attached to the full traits command.
    """


class ZapScriptError(Exception, ErrorFormatter):
    """Base exception for all zapscript errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    #: Default message used when none is given.
    default_message = 'zapscript error'

    def __init__(self, message: str | None = None, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing location and source.
        """
        self.message = message or self.default_message
        self.context = context

        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @property
    def position(self) -> int | None:
        """Rune offset of the failure, if known."""
        if not self.context:
            return None

        return self.context.get('position')

    @classmethod
    def at(cls, position: int, source: str | None = None, *,
           message: str | None = None,
           error: Exception | None = None) -> 'Self':
        """Create an error instance anchored at an offset.

        Args:
            position: Rune offset of the failure.
            source: Optional source text for snippets.
            message: Optional message overriding the default one.
            error: Optional underlying exception.

        Returns:
            An initialized error with location context.
        """
        error_context = ErrorContext(
            source=source,
            position=position,
            error=error,
        )

        return cls(message, context=error_context)

    @classmethod
    def from_reader(cls, reader: 'ScriptReader', *,
                    message: str | None = None,
                    error: Exception | None = None) -> 'Self':
        """Create an error instance at the current reader offset.

        Args:
            reader: Reader that detected the failure.
            message: Optional message overriding the default one.
            error: Optional underlying exception.

        Returns:
            An initialized error with location context.
        """
        return cls.at(reader.pos, reader.source, message=message, error=error)


class ParseError(ZapScriptError):
    """Base error for hard failures while scanning a script."""

    default_message = 'parse error'


class EmptyScriptError(ParseError):
    """Script contains no commands and no traits."""

    default_message = 'script is empty'


class UnexpectedEOFError(ParseError):
    """Input ended right after a bare command prefix."""

    default_message = 'unexpected end of file'


class EmptyCommandNameError(ParseError):
    """Command prefix is not followed by a name."""

    default_message = 'command name is empty'


class UnmatchedQuoteError(ParseError):
    """Quoted literal is not closed before the end of input."""

    default_message = 'unmatched quote'


class InvalidJSONError(ParseError):
    """Embedded JSON is malformed, unbalanced or not allowed here."""

    default_message = 'invalid JSON argument'


class UnmatchedExpressionError(ParseError):
    """Expression placeholder is not closed before the end of input."""

    default_message = 'unmatched expression'


class UnmatchedInputMacroExtError(ParseError):
    """Extended input macro is not closed before the end of the command."""

    default_message = 'unmatched input macro extension'


class UnmatchedArrayBracketError(ParseError):
    """Trait array is not closed properly."""

    default_message = 'unmatched array bracket'


class InvalidTraitKeyError(ParseError):
    """Trait key is invalid and nothing else can be recovered."""

    default_message = 'invalid trait key'


class InvalidEncodingError(ParseError):
    """Input is not valid UTF-8 text."""

    default_message = 'invalid UTF-8 input'


class ParserStateError(ZapScriptError):
    """Single-use parser was invoked a second time."""

    default_message = 'parser has already been used'


class EvaluationError(ZapScriptError):
    """Expression engine failed to evaluate an expression.

    The original engine exception is chained as `__cause__` and kept
    in the error context.
    """

    default_message = 'failed to evaluate expression'

    def __init__(self, message: str | None = None, *,
                 context: ErrorContext | None = None,
                 expression: str | None = None) -> None:
        """Initialize an evaluation error.

        Args:
            message: Human-readable error description.
            context: Error context containing the underlying error.
            expression: Source of the failing expression.
        """
        self.expression = expression

        super().__init__(message, context=context)

    @classmethod
    def from_expression(cls, expression: str,
                        error: Exception | None = None) -> 'Self':
        """Create an error for a failing expression.

        Args:
            expression: Source of the failing expression.
            error: Optional underlying exception.

        Returns:
            An initialized evaluation error.
        """
        message = f'{cls.default_message} {expression!r}'
        if error is not None:
            message += f': {error}'

        return cls(message, context=ErrorContext(error=error),
                   expression=expression)


class BadExpressionReturnError(EvaluationError):
    """Expression produced a value that can not be rendered as text."""

    default_message = 'expression return type not supported'


class TagFilterError(ZapScriptError):
    """Tag filter string is malformed."""

    default_message = 'invalid tag filter'


class AdvArgsError(ZapScriptError):
    """Advanced arguments do not match the schema of a command."""

    default_message = 'invalid advanced arguments'

    @classmethod
    def from_validation_error(cls, error: 'ValidationError') -> 'Self':
        """Create an error from a pydantic validation failure.

        Args:
            error: Validation error raised by a typed argument schema.

        Returns:
            An error listing every failing key.
        """
        lines = [f'{cls.default_message} for {error.title}']
        for details in error.errors():
            location = '.'.join(str(part) for part in details['loc']) or '<root>'
            lines.append(f'{" " * FORMAT_INDENT}{location}: {details["msg"]}')

        return cls(linesep.join(lines), context=ErrorContext(error=error))
