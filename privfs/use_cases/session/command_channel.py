"""
Command channel serializing commands over one privileged session.
"""

import logging
import threading
from typing import Optional

from typing_extensions import override

from privfs.entities.command_result import CommandResult
from privfs.exceptions import SessionTimeoutError, SessionUnavailableError
from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.ports.session.privileged_session_port import PrivilegedSessionPort


class CommandChannel(CommandChannelPort):
    """
    Synchronous command execution on top of a privileged session.

    All handles sharing a channel serialize through its lock: one command is
    in flight at a time, so output lines always belong to the command that
    is being waited for.
    """

    def __init__(
        self,
        session: PrivilegedSessionPort,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the channel.

        Args:
            session: The privileged session commands are submitted to
            timeout: Seconds to wait for each command; None waits indefinitely
            logger: Logger instance to use for logging
        """
        self._session = session
        self._timeout = timeout
        self._lock = threading.Lock()
        self._logger = logger or logging.getLogger(__name__)

    @override
    def execute(self, command: str) -> CommandResult:
        """
        Run a command and wait for the session to become idle.

        Args:
            command: Shell command line to run

        Returns:
            CommandResult with the ordered output lines and the exit code

        Raises:
            SessionUnavailableError: If the session is not running or died mid-command
            SessionTimeoutError: If the configured timeout elapsed
        """
        with self._lock:
            if not self._session.is_running():
                raise SessionUnavailableError(
                    f"Privileged session is not running, cannot run '{command}'"
                )

            lines: list[str] = []
            codes: list[int] = []
            self._logger.debug(f"running cmd: '{command}'")
            self._session.add_command(command, lines.append, codes.append)

            if not self._session.wait_for_idle(self._timeout):
                self._logger.error(
                    f"Command '{command}' did not complete within {self._timeout}s"
                )
                raise SessionTimeoutError(
                    f"Command '{command}' did not complete within {self._timeout}s"
                )

            if not codes:
                raise SessionUnavailableError(
                    f"Privileged session ended before '{command}' completed"
                )

            return CommandResult(command=command, lines=tuple(lines), code=codes[0])

    @override
    def run_for_output(self, command: str) -> str:
        output = self.execute(command).output
        self._logger.debug(f"read output of cmd '{command}': '{output}'")
        return output
