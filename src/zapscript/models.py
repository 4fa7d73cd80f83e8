"""Pydantic models for parsed scripts.

This module defines the immutable result types produced by the parser
(`Script`, `Command` and the `AdvArgs` container) together with the base
classes shared by every model and settings class in the package.
"""

from collections.abc import Callable, Iterator

from pydantic import BaseModel, ConfigDict, Field, RootModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from zapscript.names import AdvArgName, CommandName, Key
from zapscript.values import TraitValue  # noqa: TC001


class SchemaModel(BaseModel):
    """Base immutable model for all parser results.

    Design principles enforced by this model:
        - Immutability: results cannot be modified after creation, so
          a parsed script can be shared and evaluated repeatedly.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.

    All result models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so unrelated environment variables never break resolution.

    All settings models must inherit from this class.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class AdvArgs(RootModel[dict[AdvArgName, str] | None]):
    """Read-only container of advanced arguments.

    Wraps the raw key/value mapping so callers go through accessors
    instead of mutating a shared dictionary. An unset container dumps
    to JSON `null` while a present but empty one dumps to `{}`.
    """

    model_config = ConfigDict(frozen=True)

    root: dict[AdvArgName, str] | None = None

    def get(self, key: Key | str) -> str:
        """Look up a value, returning an empty string when missing."""
        if not self.root:
            return ''

        return self.root.get(str(key), '')

    def with_arg(self, key: Key | str, value: str) -> 'AdvArgs':
        """Return a copy with one key set.

        The receiver is never mutated.

        Args:
            key: Advanced argument key.
            value: New value for the key.

        Returns:
            A new container holding the previous arguments and the new one.
        """
        return type(self)({**(self.root or {}), str(key): value})

    def get_when(self) -> tuple[str, bool]:
        """Return the `when` condition and whether it was given."""
        if not self.root or Key.WHEN not in self.root:
            return '', False

        return self.root[Key.WHEN], True

    def is_empty(self) -> bool:
        """Check whether no advanced arguments are present."""
        return not self.root

    def range(self, fn: Callable[[str, str], bool]) -> None:
        """Call `fn` for each argument until it returns a falsy value.

        Args:
            fn: Callback receiving a key and its value.
        """
        for key, value in self:
            if not fn(key, value):
                return

    def items(self) -> tuple[tuple[str, str], ...]:
        """Return all key/value pairs in parse order."""
        return tuple((self.root or {}).items())

    def raw(self) -> dict[str, str] | None:
        """Return a copy of the underlying mapping, or None if unset."""
        if self.root is None:
            return None

        return dict(self.root)

    def __iter__(self) -> Iterator[tuple[str, str]]:  # type: ignore[override]
        """Iterate over key/value pairs."""
        return iter(self.items())

    def __len__(self) -> int:
        """Number of arguments."""
        return len(self.root or {})

    def __contains__(self, key: object) -> bool:
        """Check whether a key is present."""
        return bool(self.root) and str(key) in self.root


class Command(SchemaModel):
    """Single command of a script."""

    name: CommandName = Field(
        title='Name',
        description='Lowercase command name.',
    )

    args: tuple[str, ...] = Field(
        default=(),
        title='Arguments',
        description=(
            'Positional arguments. Empty when the command was written '
            'without an argument list.'
        ),
    )

    adv_args: AdvArgs = Field(
        default_factory=AdvArgs,
        title='Advanced arguments',
        description='Named `key=value` arguments written after `?`.',
    )


class Script(SchemaModel):
    """Parsed script: an ordered command chain plus merged traits."""

    cmds: tuple[Command, ...] = Field(
        default=(),
        title='Commands',
        description='Commands in chain order.',
    )

    traits: dict[str, TraitValue] | None = Field(
        default=None,
        title='Traits',
        description=(
            'Typed metadata merged across every trait segment, '
            'later keys overriding earlier ones. Null when no segment '
            'contributed traits.'
        ),
    )


class ParserSettings(SettingsModel):
    """Parser settings resolved from `ZAPSCRIPT_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='ZAPSCRIPT_',
    )

    strict: bool = Field(
        default=False,
        title='Strict mode',
        description=(
            'Raise on invalid trait keys instead of silently dropping '
            'the trait segment.'
        ),
    )

    max_length: int | None = Field(
        default=None,
        ge=1,
        title='Maximum length',
        description='Reject scripts longer than this many characters.',
    )
