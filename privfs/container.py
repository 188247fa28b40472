"""
Dependency injection container for managing application dependencies.
"""

import logging
from typing import Any

from privfs.adapters.files.ls_output_parser import LsOutputParser
from privfs.adapters.session.subprocess_shell_session import SubprocessShellSession
from privfs.config.settings import settings
from privfs.ports.files.listing_parser_port import ListingParserPort
from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.ports.session.privileged_session_port import PrivilegedSessionPort
from privfs.use_cases.files.list_files import ListFilesUseCase
from privfs.use_cases.files.root_file_system import RootFileSystem
from privfs.use_cases.files.transfer_files import FileTransferUseCase
from privfs.use_cases.session.command_channel import CommandChannel


class DependencyContainer:
    """
    Container for managing application dependencies using dependency injection.

    The privileged session is started lazily on first use and shared by
    every component until close() is called.
    """

    def __init__(self):
        self._instances = {}
        self._logger = logging.getLogger(__name__)

    def get_session(self) -> PrivilegedSessionPort:
        """
        Get the started privileged session.

        Returns:
            PrivilegedSessionPort implementation

        Raises:
            SessionUnavailableError: If the shell cannot be started
        """
        if "session" not in self._instances:
            session = SubprocessShellSession(settings.shell_command, self._logger)
            session.start()
            self._instances["session"] = session
        return self._instances["session"]

    def get_command_channel(self) -> CommandChannelPort:
        """
        Get the command channel shared by all file handles.

        Returns:
            CommandChannelPort implementation
        """
        if "command_channel" not in self._instances:
            self._instances["command_channel"] = CommandChannel(
                self.get_session(), settings.command_timeout, self._logger
            )
        return self._instances["command_channel"]

    def get_listing_parser(self) -> ListingParserPort:
        if "listing_parser" not in self._instances:
            self._instances["listing_parser"] = LsOutputParser(logger=self._logger)
        return self._instances["listing_parser"]

    def get_file_system(self) -> RootFileSystem[Any]:
        """
        Get the filesystem view rooted at the configured home directory.

        Returns:
            RootFileSystem producing RootFile handles
        """
        if "file_system" not in self._instances:
            self._instances["file_system"] = RootFileSystem(
                self.get_command_channel(),
                home_directory=settings.home_directory,
                parser=self.get_listing_parser(),
                logger=self._logger,
            )
        return self._instances["file_system"]

    def get_list_files_use_case(self) -> ListFilesUseCase:
        """
        Get list files use case with injected dependencies.

        Returns:
            Configured ListFilesUseCase
        """
        if "list_files_use_case" not in self._instances:
            self._instances["list_files_use_case"] = ListFilesUseCase(
                self.get_file_system(), self._logger
            )
        return self._instances["list_files_use_case"]

    def get_file_transfer_use_case(self) -> FileTransferUseCase:
        """
        Get file transfer use case with injected dependencies.

        Returns:
            Configured FileTransferUseCase
        """
        if "file_transfer_use_case" not in self._instances:
            self._instances["file_transfer_use_case"] = FileTransferUseCase(
                self.get_file_system(), self._logger
            )
        return self._instances["file_transfer_use_case"]

    def close(self):
        """Close the privileged session, if started, and drop all instances."""
        session = self._instances.get("session")
        if session is not None:
            session.close()
        self.reset()

    def reset(self):
        """Reset all instances (useful for testing)."""
        self._instances.clear()


# Global container instance
container = DependencyContainer()
