"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from zapscript.core import ScriptParser
from zapscript.environment import ArgExprEnv, ExprEnvActiveMedia, ExprEnvDevice

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType


@pytest.fixture
def parser() -> 'Callable[..., ScriptParser]':
    """Provide a factory of fresh single-use parsers.

    Returns:
        A callable taking the script text and parser keyword options.
    """
    def make(text: str | bytes, **options: bool) -> ScriptParser:
        return ScriptParser(text, **options)

    return make


@pytest.fixture
def arg_env() -> ArgExprEnv:
    """Provide a populated expression environment for arguments."""
    return ArgExprEnv(
        platform='mister',
        version='2.8.0',
        scan_mode='tap',
        media_playing=True,
        device=ExprEnvDevice(hostname='arcade', os='linux', arch='arm'),
        active_media=ExprEnvActiveMedia(
            launcher_id='snes',
            system_id='SNES',
            system_name='Super Nintendo',
            path='/media/snes/mario.sfc',
            name='Super Mario World',
        ),
    )


@pytest.fixture
def fake_engine(mocker: 'MockerFixture') -> 'MockType':
    """Provide an expression engine double.

    The double echoes expression sources in upper case, so tests can
    observe which sources reached the engine and in which order.
    """
    engine = mocker.Mock()
    engine.evaluate.side_effect = lambda source, environment: source.upper()

    return engine


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a click test runner."""
    return CliRunner()
