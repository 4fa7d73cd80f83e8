"""Expression evaluation back ends.

The parser only extracts expression source; evaluating it is delegated
to an engine implementing `ExpressionEngine`. The default engine runs
expressions through `simpleeval`, which evaluates a safe subset of
Python syntax against a mapping of names.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from simpleeval import DEFAULT_FUNCTIONS, DEFAULT_NAMES, EvalWithCompoundTypes

#: Lowercase literals available to every expression.
LITERAL_NAMES = {
    'true': True,
    'false': False,
    'nil': None,
}

#: Functions available to every expression on top of the library defaults.
EXTRA_FUNCTIONS = {
    'len': len,
    'lower': str.lower,
    'upper': str.upper,
}


@runtime_checkable
class ExpressionEngine(Protocol):
    """Callable back end evaluating one expression."""

    def evaluate(self, source: str, environment: Mapping[str, Any]) -> Any:  # noqa: ANN401
        """Evaluate expression source against an environment.

        Args:
            source: Raw expression source, without placeholder brackets.
            environment: Names visible to the expression.

        Returns:
            Evaluation result.
        """


class SimpleEngine:
    """Expression engine backed by `simpleeval`.

    Mapping values in the environment support attribute access, so
    `device.hostname` reads `environment['device']['hostname']`.
    """

    def __init__(self, functions: Mapping[str, Any] | None = None) -> None:
        """Initialize the engine.

        Args:
            functions: Extra functions exposed to expressions.
        """
        self.functions = {
            **DEFAULT_FUNCTIONS,
            **EXTRA_FUNCTIONS,
            **(functions or {}),
        }

    def evaluate(self, source: str, environment: Mapping[str, Any]) -> Any:  # noqa: ANN401
        """Evaluate expression source against an environment."""
        evaluator = EvalWithCompoundTypes(
            names={**DEFAULT_NAMES, **LITERAL_NAMES, **environment},
            functions=self.functions,
        )

        return evaluator.eval(source.strip())
