"""
Command channel port interface used by file handles to run privileged commands.
"""

from abc import ABC, abstractmethod

from privfs.entities.command_result import CommandResult


class CommandChannelPort(ABC):
    """Port interface for synchronous command execution."""

    @abstractmethod
    def execute(self, command: str) -> CommandResult:
        """
        Run a command and wait for it to complete.

        Args:
            command: Shell command line to run

        Returns:
            CommandResult with the ordered output lines and the exit code

        Raises:
            SessionUnavailableError: If the privileged session is unusable
            SessionTimeoutError: If a timeout is configured and elapsed
        """
        pass

    def run_for_status(self, command: str) -> bool:
        """Run a command; True iff its exit code is 0."""
        return self.execute(command).succeeded

    def run_for_output(self, command: str) -> str:
        """Run a command and return all of its output lines concatenated."""
        return self.execute(command).output
