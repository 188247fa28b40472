"""
Use case for listing files in a directory.
"""

import logging
from typing import Any, Optional

from privfs.exceptions import BaseAppError, FileSystemError
from privfs.use_cases.files.root_file_system import RootFileSystem


class ListFilesUseCase:
    """Use case for listing files in a directory."""

    def __init__(
        self,
        file_system: RootFileSystem[Any],
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the use case.

        Args:
            file_system: Filesystem view to list through
            logger: Logger instance to use for logging
        """
        self._file_system = file_system
        self._logger = logger or logging.getLogger(__name__)

    def execute(self, directory: str) -> list[Any]:
        """
        List all entries of a directory.

        Args:
            directory: Path to the directory to list

        Returns:
            List of file handles, in listing order

        Raises:
            FileSystemError: If the path does not exist or is not a directory
            SessionUnavailableError: If the privileged session is unusable
        """
        try:
            self._logger.info(f"Listing files in directory: {directory}")
            handle = self._file_system.get_file(directory)
            if not handle.does_exist():
                raise FileSystemError(f"Directory does not exist: {directory}")
            if not handle.is_directory():
                raise FileSystemError(f"Path is not a directory: {directory}")
            files = handle.list_files()
            self._logger.info(f"Found {len(files)} files")
            return files
        except BaseAppError:
            raise
        except Exception as e:
            self._logger.error(f"Error listing files: {e}")
            raise FileSystemError(f"Failed to list files in {directory}: {str(e)}")
