"""Expression environment models.

These models describe the names made available to expressions by the
surrounding application: the device, the media currently playing, the
token being scanned and so on. Field names are snake_case both in the
expression language and in JSON.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from zapscript.models import SchemaModel


class ExprEnvDevice(SchemaModel):
    """Device the script runs on."""

    hostname: str = ''
    os: str = ''
    arch: str = ''


class ExprEnvLastScanned(SchemaModel):
    """Token scanned before the current one."""

    id: str = ''
    value: str = ''
    data: str = ''


class ExprEnvScanned(SchemaModel):
    """Token currently being processed."""

    id: str = ''
    value: str = ''
    data: str = ''


class ExprEnvActiveMedia(SchemaModel):
    """Media currently running."""

    launcher_id: str = ''
    system_id: str = ''
    system_name: str = ''
    path: str = ''
    name: str = ''


class ExprEnvLaunching(SchemaModel):
    """Media about to launch."""

    path: str = ''
    system_id: str = ''
    launcher_id: str = ''


class ArgExprEnv(SchemaModel):
    """Environment for expressions inside command arguments."""

    active_media: ExprEnvActiveMedia = Field(default_factory=ExprEnvActiveMedia)
    device: ExprEnvDevice = Field(default_factory=ExprEnvDevice)
    last_scanned: ExprEnvLastScanned = Field(default_factory=ExprEnvLastScanned)
    scanned: ExprEnvScanned = Field(default_factory=ExprEnvScanned)
    launching: ExprEnvLaunching = Field(default_factory=ExprEnvLaunching)
    platform: str = ''
    version: str = ''
    scan_mode: str = ''
    media_playing: bool = False


class CustomLauncherExprEnv(SchemaModel):
    """Environment for expressions inside custom launcher definitions."""

    platform: str = ''
    version: str = ''
    device: ExprEnvDevice = Field(default_factory=ExprEnvDevice)
    media_path: str = ''
    action: str = ''
    install_dir: str = ''
    server_url: str = ''
    system_id: str = ''
    launcher_id: str = ''


def to_environment(value: Any) -> dict[str, Any]:  # noqa: ANN401
    """Normalize an environment into a mapping of names.

    Args:
        value: None, a mapping or a pydantic model.

    Returns:
        A new dictionary of names.

    Raises:
        TypeError: If the value is of any other type.
    """
    if value is None:
        return {}

    if isinstance(value, BaseModel):
        return value.model_dump()

    if isinstance(value, Mapping):
        return dict(value)

    raise TypeError(f'Can not use {type(value).__name__!r} as expression environment')
