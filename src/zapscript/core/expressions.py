"""Expression placeholder tokenizer and evaluator.

Expressions are written as `[[source]]`. Scanning replaces each of them
with its raw source wrapped in private-use marker runes; evaluation is a
separate later pass that splits the marked text back into string and
expression parts and renders each expression through an engine.
"""

from collections.abc import Iterator, Mapping
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, NamedTuple

from zapscript.engine import SimpleEngine
from zapscript.environment import to_environment
from zapscript.errors import (
    BadExpressionReturnError,
    EvaluationError,
    UnmatchedExpressionError,
    ZapScriptError,
)
from zapscript.names import EOF, SYM_ESCAPE, SYM_EXPR_END, SYM_EXPR_START, TOK_EXPR_END, TOK_EXPR_START
from zapscript.values import format_result

from .escapes import EscapesMixin

if TYPE_CHECKING:
    from pydantic import BaseModel

if TYPE_CHECKING:
    from zapscript.engine import ExpressionEngine

#: Environment accepted by the evaluator.
type Environment = Mapping[str, Any] | BaseModel | None


class PartType(Enum):
    """Kind of a tokenized text part."""

    STRING = auto()
    EXPRESSION = auto()


class Part(NamedTuple):
    """Run of tokenized text."""

    type: PartType
    value: str


class ExpressionsMixin(EscapesMixin):
    """Mixin extracting and evaluating expression placeholders."""

    def parse_expression(self) -> str:
        """Capture an expression after an already consumed `[`.

        A `[` not followed by a second `[` is plain text.

        Returns:
            The marked expression source, or a literal `[`.

        Raises:
            UnmatchedExpressionError: If input ends inside the expression.
        """
        if self.peek() != SYM_EXPR_START:
            return SYM_EXPR_START

        self.skip()

        buf = [TOK_EXPR_START]
        while True:
            ch = self.read()
            if ch == EOF:
                raise UnmatchedExpressionError.from_reader(self)

            if ch == SYM_EXPR_END and self.peek() == SYM_EXPR_END:
                self.skip()
                break

            buf.append(ch)

        buf.append(TOK_EXPR_END)

        return ''.join(buf)

    def parse_expressions(self) -> str:
        """Decode escapes and tokenize expressions in the whole input.

        No other syntax is recognized, which suits standalone template
        text.

        Returns:
            Text with expressions wrapped in marker runes.
        """
        buf = []
        while (ch := self.read()) != EOF:
            if ch == SYM_ESCAPE:
                buf.append(self.read_escaped())
            elif ch == SYM_EXPR_START:
                buf.append(self.parse_expression())
            else:
                buf.append(ch)

        return ''.join(buf)

    def split_parts(self) -> Iterator[Part]:
        """Split tokenized input into string and expression parts.

        Yields:
            Parts in input order. Adjacent text is merged into one part.

        Raises:
            UnmatchedExpressionError: If a start marker is never closed.
        """
        text = []
        while (ch := self.read()) != EOF:
            if ch != TOK_EXPR_START:
                text.append(ch)
                continue

            if text:
                yield Part(PartType.STRING, ''.join(text))
                text = []

            source = []
            while (ch := self.read()) != TOK_EXPR_END:
                if ch == EOF:
                    raise UnmatchedExpressionError.from_reader(self)
                source.append(ch)

            yield Part(PartType.EXPRESSION, ''.join(source))

        if text:
            yield Part(PartType.STRING, ''.join(text))

    def eval_expressions(self, environment: Environment = None, *,
                         engine: 'ExpressionEngine | None' = None) -> str:
        """Evaluate every tokenized expression in the input.

        Args:
            environment: Names visible to expressions, either a mapping
                or a pydantic model.
            engine: Expression back end, `SimpleEngine` by default.

        Returns:
            Text with each expression replaced by its rendered result.

        Raises:
            EvaluationError: If the engine fails on an expression.
            BadExpressionReturnError: If a result can not be rendered.
            UnmatchedExpressionError: If a start marker is never closed.
        """
        if engine is None:
            engine = SimpleEngine()

        names = to_environment(environment)

        rendered = []
        for part in self.split_parts():
            if part.type is PartType.STRING:
                rendered.append(part.value)
                continue

            try:
                result = engine.evaluate(part.value, names)
            except ZapScriptError:
                raise
            except Exception as error:
                raise EvaluationError.from_expression(part.value, error) from error

            text = format_result(result)
            if text is None:
                raise BadExpressionReturnError.from_expression(
                    part.value,
                    TypeError(f'{result!r} ({type(result).__name__})'),
                )

            rendered.append(text)

        return ''.join(rendered)
