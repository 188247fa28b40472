"""
File handle entity backed by the privileged session.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Generic, Optional, TypeVar

from privfs.adapters.files.ls_output_parser import LsOutputParser
from privfs.adapters.files.permission_streams import (
    PermissionRestoringFileIO,
    open_input_stream,
    open_output_stream,
)
from privfs.entities.file_metadata import FileMetadata
from privfs.ports.files.listing_parser_port import ListingParserPort
from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.utils.paths import join_path, parent_path, quote

T = TypeVar("T")

FileFactory = Callable[[CommandChannelPort, FileMetadata, str], T]


class RootFile(Generic[T]):
    """
    Snapshot of one filesystem entry plus the operations to act on it.

    Every operation is a command run through the shared channel. Metadata is
    captured at construction and never refreshed: after mkdir, delete or
    move, stat the path again to observe the effect.

    Children returned by list_files() are built by the injected factory, so
    a front end can wrap handles in its own type and get that type back from
    listings.
    """

    def __init__(
        self,
        channel: CommandChannelPort,
        metadata: FileMetadata,
        absolute_path: str,
        factory: Optional[FileFactory[T]] = None,
        parser: Optional[ListingParserPort] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the handle.

        Args:
            channel: Shared command channel, not owned by the handle
            metadata: Metadata of the entry at absolute_path
            absolute_path: Fully-qualified path of the entry
            factory: Builds child handles for list_files(); defaults to plain
                RootFile handles sharing this handle's parser and logger
            parser: Listing parser used by list_files()
            logger: Logger instance to use for logging
        """
        self._channel = channel
        self._metadata = metadata
        self._absolute_path = absolute_path
        self._parser = parser or LsOutputParser()
        self._logger = logger or logging.getLogger(__name__)
        self._factory: FileFactory[T] = factory or self._default_factory  # type: ignore[assignment]

    def _default_factory(
        self, channel: CommandChannelPort, metadata: FileMetadata, path: str
    ) -> "RootFile[Any]":
        return RootFile(channel, metadata, path, parser=self._parser, logger=self._logger)

    def get_absolute_path(self) -> str:
        return self._absolute_path

    def get_name(self) -> str:
        return self._metadata.name

    def is_directory(self) -> bool:
        return self._metadata.is_directory

    def is_file(self) -> bool:
        return self._metadata.is_file

    def does_exist(self) -> bool:
        return self._metadata.exists

    # Access is decided by the privileged commands themselves.
    def is_readable(self) -> bool:
        return True

    def is_writable(self) -> bool:
        return True

    def is_removable(self) -> bool:
        return True

    def get_last_modified(self) -> datetime:
        return self._metadata.modified_at

    def set_last_modified(self, time: datetime) -> bool:
        """Changing timestamps is not supported; always returns False."""
        self._logger.debug(f"[{self.get_name()}] set_last_modified({time}) unsupported")
        return False

    def get_size(self) -> int:
        return self._metadata.size

    def mkdir(self) -> bool:
        self._logger.debug(f"[{self.get_name()}] mkdir()")
        return self._channel.run_for_status(f"mkdir {quote(self._absolute_path)}")

    def delete(self) -> bool:
        """Recursively and forcibly remove the entry. There is no confirmation."""
        self._logger.debug(f"[{self.get_name()}] delete()")
        return self._channel.run_for_status(f"rm -rf {quote(self._absolute_path)}")

    def move(self, destination: "RootFile[Any]") -> bool:
        target = destination.get_absolute_path()
        self._logger.debug(f"[{self.get_name()}] move({target})")
        return self._channel.run_for_status(
            f"mv {quote(self._absolute_path)} {quote(target)}"
        )

    def list_files(self) -> list[T]:
        """
        List the entries of this directory.

        Returns:
            One handle per parsed listing line, in the order ls emitted them
        """
        self._logger.debug(f"[{self.get_name()}] list_files()")
        result = self._channel.execute(f"ls -lA {quote(self._absolute_path)}")

        files: list[T] = []
        for line in result.lines:
            metadata = self._parser.parse_line(line)
            if metadata is None:
                continue
            path = join_path(self._absolute_path, metadata.name)
            files.append(self._factory(self._channel, metadata, path))
        return files

    def create_output_stream(self, offset: int = 0) -> PermissionRestoringFileIO:
        """
        Open the file for writing from the beginning; offset is not honored.

        For a file that does not exist yet, the containing directory's mode
        is relaxed instead, since creating an entry needs write access there.
        """
        self._logger.debug(f"[{self.get_name()}] create_output_stream(offset: {offset})")
        if self._metadata.exists:
            permission_path = self._absolute_path
        else:
            permission_path = parent_path(self._absolute_path)
        return open_output_stream(
            self._channel, self._absolute_path, permission_path, self._logger
        )

    def create_input_stream(self, offset: int = 0) -> PermissionRestoringFileIO:
        """Open the file for reading from the beginning; offset is not honored."""
        self._logger.debug(f"[{self.get_name()}] create_input_stream(offset: {offset})")
        return open_input_stream(self._channel, self._absolute_path, self._logger)

    def get_details(self) -> dict[str, Any]:
        """
        Get entry details for display.

        Returns:
            Dictionary with entry information
        """
        if not self._metadata.exists:
            file_type = "missing"
        elif self._metadata.is_directory:
            file_type = "directory"
        else:
            file_type = "file"
        return {
            "path": self._absolute_path,
            "name": self.get_name(),
            "size": self._metadata.size,
            "type": file_type,
            "exists": self._metadata.exists,
            "modified_at": self._metadata.modified_at,
            "directory": parent_path(self._absolute_path),
        }

    def __repr__(self) -> str:
        return f"RootFile(path='{self._absolute_path}')"
