"""Typed advanced argument schemas.

The parser stores advanced arguments as plain strings. Commands that
consume them validate the raw container against one of the schemas in
this module, which restricts the accepted keys and values and converts
the `tags` argument into parsed tag filters.
"""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field, ValidationError, field_validator

from zapscript.errors import AdvArgsError, TagFilterError
from zapscript.models import SchemaModel
from zapscript.names import ACTION_DETAILS, ACTION_RUN, MODE_SHUFFLE
from zapscript.tags import TagFilter, parse_tag_filters

if TYPE_CHECKING:
    from zapscript.models import AdvArgs

#: Accepted launch actions. An empty string means the default action.
type Action = Literal['', 'run', 'details']

#: Accepted playlist modes. An empty string means the default mode.
type Mode = Literal['', 'shuffle']


class GlobalArgs(SchemaModel):
    """Advanced arguments available to every command."""

    when: str = Field(
        default='',
        title='Condition',
        description='When given and falsy, the command is skipped.',
    )


class LaunchArgs(GlobalArgs):
    """Advanced arguments of the `launch` command."""

    launcher: str = Field(default='', title='Launcher ID override')
    system: str = Field(default='', title='System used for path resolution')
    action: Action = Field(default='', title='Launch action')
    name: str = Field(default='', title='File name for remote installs')
    pre_notice: str = Field(default='', title='Notice shown before a remote download')


class _TaggedLaunchArgs(GlobalArgs):
    """Advanced arguments of launch commands selecting media by tags."""

    launcher: str = Field(default='', title='Launcher ID override')
    action: Action = Field(default='', title='Launch action')
    tags: tuple[TagFilter, ...] = Field(default=(), title='Tag filters')

    @field_validator('tags', mode='before')
    @classmethod
    def parse_tags(cls, value: Any) -> Any:  # noqa: ANN401
        """Parse a raw tag filter string."""
        if not isinstance(value, str):
            return value

        try:
            return parse_tag_filters(value)
        except TagFilterError as error:
            raise ValueError(error.message) from error


class LaunchRandomArgs(_TaggedLaunchArgs):
    """Advanced arguments of the `launch.random` command."""


class LaunchSearchArgs(_TaggedLaunchArgs):
    """Advanced arguments of the `launch.search` command."""


class LaunchTitleArgs(_TaggedLaunchArgs):
    """Advanced arguments of the `launch.title` command."""


class PlaylistArgs(GlobalArgs):
    """Advanced arguments of playlist commands."""

    mode: Mode = Field(default='', title='Playlist mode')


class MisterScriptArgs(GlobalArgs):
    """Advanced arguments of the `mister.script` command."""

    hidden: str = Field(default='', title='Hide the script window')


def load_adv_args[T: GlobalArgs](model: type[T], adv_args: 'AdvArgs') -> T:
    """Validate a command's advanced arguments against a schema.

    Args:
        model: Typed schema, such as `LaunchArgs`.
        adv_args: Raw container from a parsed command.

    Returns:
        The validated schema instance.

    Raises:
        AdvArgsError: If a key is unknown or a value is invalid.
    """
    try:
        return model.model_validate(adv_args.raw() or {})
    except ValidationError as error:
        raise AdvArgsError.from_validation_error(error) from error


def is_action_run(action: str) -> bool:
    """Check whether an action launches media (empty means run)."""
    return not action or action.lower() == ACTION_RUN


def is_action_details(action: str) -> bool:
    """Check whether an action shows media details."""
    return action.lower() == ACTION_DETAILS


def is_mode_shuffle(mode: str) -> bool:
    """Check whether a playlist mode shuffles."""
    return mode.lower() == MODE_SHUFFLE
