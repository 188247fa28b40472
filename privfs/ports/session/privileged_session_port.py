"""
Privileged session port interface defining the contract for an elevated shell.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional


class PrivilegedSessionPort(ABC):
    """Port interface for a long-lived, elevated command-execution session."""

    @abstractmethod
    def start(self) -> None:
        """
        Start the session.

        Raises:
            SessionUnavailableError: If the session cannot be established
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Terminate the session; pending commands never receive a result."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Whether the session can still accept commands."""
        pass

    @abstractmethod
    def add_command(
        self,
        command: str,
        on_line: Callable[[str], None],
        on_result: Callable[[int], None],
    ) -> None:
        """
        Queue a command.

        Output lines are passed to on_line in the order the session emits
        them, then the exit code is passed to on_result exactly once.

        Args:
            command: Shell command line to run
            on_line: Callback for each output line (without line terminator)
            on_result: Callback for the exit code

        Raises:
            SessionUnavailableError: If the session is not running
        """
        pass

    @abstractmethod
    def wait_for_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every queued command has completed.

        Args:
            timeout: Seconds to wait at most; None waits indefinitely

        Returns:
            True when idle, False if the timeout elapsed first
        """
        pass
