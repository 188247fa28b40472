"""
Filesystem view whose handles act through the privileged session.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, TypeVar

from typing_extensions import override

from privfs.adapters.files.ls_output_parser import LsOutputParser
from privfs.entities.file_metadata import FileMetadata
from privfs.entities.root_file import FileFactory, RootFile
from privfs.ports.files.file_system_port import FileSystemPort
from privfs.ports.files.listing_parser_port import ListingParserPort
from privfs.ports.session.command_channel_port import CommandChannelPort
from privfs.utils.paths import base_name, normalize_path, quote

T = TypeVar("T")


class RootFileSystem(FileSystemPort[T]):
    """Filesystem provider for file-serving front ends."""

    def __init__(
        self,
        channel: CommandChannelPort,
        home_directory: str = "/",
        factory: Optional[FileFactory[T]] = None,
        parser: Optional[ListingParserPort] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the filesystem view.

        Args:
            channel: Command channel shared by every handle of this view
            home_directory: Absolute home path, also the initial working directory
            factory: Builds the handles returned by this view and their
                listings; defaults to plain RootFile handles
            parser: Listing parser for stat and listings
            logger: Logger instance to use for logging
        """
        self._channel = channel
        self._parser = parser or LsOutputParser()
        self._logger = logger or logging.getLogger(__name__)
        self._factory: FileFactory[T] = factory or self._default_factory  # type: ignore[assignment]
        self._home = normalize_path(home_directory)
        self._working_directory = self._home

    def _default_factory(
        self, channel: CommandChannelPort, metadata: FileMetadata, path: str
    ) -> RootFile[Any]:
        return RootFile(channel, metadata, path, parser=self._parser, logger=self._logger)

    def stat(self, path: str) -> FileMetadata:
        """
        Query the metadata of one path.

        Args:
            path: Absolute, normalized path

        Returns:
            The entry's metadata named after the path's last segment, or
            FileMetadata.missing when nothing could be parsed
        """
        name = base_name(path)
        result = self._channel.execute(f"ls -lAd {quote(path)}")
        for line in result.lines:
            metadata = self._parser.parse_line(line)
            if metadata is not None:
                # ls -d prints the path as given, not the base name
                return replace(metadata, name=name)
        self._logger.debug(f"No entry for {path} (exit code {result.code})")
        return FileMetadata.missing(name)

    @override
    def get_file(self, path: str) -> T:
        absolute_path = normalize_path(path, self._working_directory)
        self._logger.debug(f"get_file({path}) -> {absolute_path}")
        return self._factory(self._channel, self.stat(absolute_path), absolute_path)

    @override
    def get_home_directory(self) -> T:
        return self.get_file(self._home)

    @override
    def get_working_directory(self) -> T:
        return self.get_file(self._working_directory)

    @override
    def change_working_directory(self, path: str) -> bool:
        absolute_path = normalize_path(path, self._working_directory)
        metadata = self.stat(absolute_path)
        if not metadata.is_directory:
            self._logger.info(f"Cannot change working directory to {absolute_path}")
            return False
        self._working_directory = absolute_path
        return True

    @property
    def working_directory_path(self) -> str:
        return self._working_directory
