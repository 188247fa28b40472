"""
Pytest configuration and shared fixtures.
"""

import shlex
from typing import Callable, Iterable, Optional
from unittest.mock import MagicMock

import pytest

from privfs.entities.command_result import CommandResult
from privfs.exceptions import SessionUnavailableError
from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.ports.session.privileged_session_port import PrivilegedSessionPort


class FakeChannel(CommandChannelPort):
    """Channel answering from a script and recording every command it is given."""

    def __init__(self):
        self.commands: list[str] = []
        self.unavailable = False
        self._responses: dict[str, tuple[list[str], int]] = {}

    def respond(self, command: str, lines: Iterable[str] = (), code: int = 0) -> None:
        self._responses[command] = (list(lines), code)

    def execute(self, command: str) -> CommandResult:
        if self.unavailable:
            raise SessionUnavailableError("fake session is down")
        self.commands.append(command)
        lines, code = self._responses.get(command, ([], 0))
        return CommandResult(command=command, lines=tuple(lines), code=code)

    @property
    def chmods(self) -> list[str]:
        return [c for c in self.commands if c.startswith("chmod ")]


class ModeTrackingChannel(FakeChannel):
    """Channel keeping a mode per path: stat reports it and chmod changes it."""

    def __init__(self, modes: dict[str, str]):
        super().__init__()
        self.modes = dict(modes)

    def execute(self, command: str) -> CommandResult:
        words = shlex.split(command)
        if words[:3] == ["stat", "-c", "%a"] and words[3] in self.modes:
            self.respond(command, [self.modes[words[3]]])
        result = super().execute(command)
        if words[0] == "chmod":
            self.modes[words[2]] = words[1].lstrip("0") or "0"
        return result


class FakeSession(PrivilegedSessionPort):
    """Session delivering scripted output synchronously from add_command."""

    def __init__(self):
        self.running = True
        self.deliver_result = True
        self.becomes_idle = True
        self.submitted: list[str] = []
        self._responses: dict[str, tuple[list[str], int]] = {}

    def respond(self, command: str, lines: Iterable[str] = (), code: int = 0) -> None:
        self._responses[command] = (list(lines), code)

    def start(self) -> None:
        self.running = True

    def close(self) -> None:
        self.running = False

    def is_running(self) -> bool:
        return self.running

    def add_command(
        self,
        command: str,
        on_line: Callable[[str], None],
        on_result: Callable[[int], None],
    ) -> None:
        if not self.running:
            raise SessionUnavailableError("fake session is down")
        self.submitted.append(command)
        lines, code = self._responses.get(command, ([], 0))
        for line in lines:
            on_line(line)
        if self.deliver_result:
            on_result(code)

    def wait_for_idle(self, timeout: Optional[float] = None) -> bool:
        return self.becomes_idle


@pytest.fixture
def fake_channel():
    """
    Create a scripted command channel.

    Returns:
        FakeChannel; unscripted commands succeed with no output
    """
    return FakeChannel()


@pytest.fixture
def fake_session():
    """
    Create a scripted privileged session.

    Returns:
        FakeSession; unscripted commands succeed with no output
    """
    return FakeSession()


@pytest.fixture
def mock_logger():
    """
    Create a mock logger for testing.

    Returns:
        Mock logger instance
    """
    return MagicMock()


@pytest.fixture
def mode_channel():
    """
    Create a factory for channels that track path modes.

    Returns:
        Callable taking a {path: mode} mapping and returning a ModeTrackingChannel
    """
    return ModeTrackingChannel
